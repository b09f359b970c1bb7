"""Domain exceptions for the Taskmaster access policy.

Authorization failures are not exceptions: they are deny decisions. The
exceptions here cover invalid input (malformed paths), broken rule
definitions and configuration problems. Presentation layer maps them to
HTTP responses in exception handlers.
"""

from typing import Any


class TaskmasterException(Exception):
    """Base exception for all Taskmaster errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. path, helper name).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(TaskmasterException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class MalformedPathException(TaskmasterException):
    """Raised when a document path cannot be parsed or addresses no document.

    The decision engine catches this and denies; a lookup helper that builds
    a malformed target folds it into a false predicate.
    """

    def __init__(self, path: str, reason: str) -> None:
        """Initialize with the offending path and why it was rejected.

        Args:
            path: Raw path as given (string form).
            reason: Short description (e.g. 'odd number of segments').
        """
        super().__init__(
            f"Malformed document path {path!r}: {reason}",
            "MALFORMED_PATH",
            {"path": path, "reason": reason},
        )


class RuleDefinitionException(TaskmasterException):
    """Raised when a rule table is inconsistent (caught at build time, not per request)."""

    def __init__(self, message: str, pattern: str | None = None) -> None:
        details = {"pattern": pattern} if pattern else {}
        super().__init__(message, "RULE_DEFINITION_ERROR", details)


class ConfigurationException(TaskmasterException):
    """Raised when the service is started with an unusable configuration."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIGURATION_ERROR")
