"""Infrastructure exceptions for document store operations.

Store errors extend TaskmasterException so presentation can map them
to HTTP responses consistently. They are never folded into deny decisions.
"""

from taskmaster.domain.exceptions import TaskmasterException


class DocumentStoreException(TaskmasterException):
    """The document store could not answer a read (network, auth, server error)."""

    def __init__(self, operation: str, reason: str, path: str | None = None) -> None:
        details = {"operation": operation, "reason": reason}
        if path is not None:
            details["path"] = path
        super().__init__(
            f"Document store {operation} failed: {reason}",
            "STORE_UNAVAILABLE",
            details,
        )
