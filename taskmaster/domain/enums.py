"""Domain enumerations for the Taskmaster access policy.

Enums represent fixed sets of domain values (operations, member roles,
rule generations, deny reasons).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class Operation(_ValuesMixin, str, Enum):
    """Kind of document operation an access request asks for."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


# Shorthand for rule definitions ("allow write").
WRITE_OPERATIONS: frozenset[Operation] = frozenset(
    {Operation.CREATE, Operation.UPDATE, Operation.DELETE}
)


class MemberRole(_ValuesMixin, str, Enum):
    """Role stored on a class Member record."""

    ADMIN = "admin"
    TEACHER = "teacher"
    MEMBER = "member"


class ApprovalStatus(_ValuesMixin, str, Enum):
    """Lifecycle status of a CompletionApproval."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RuleGeneration(_ValuesMixin, str, Enum):
    """Rule table generation; both are active at the same time.

    CURRENT covers class-scoped collections and user documents. LEGACY covers
    the root-level collections kept for migration, where isAdmin also admits
    teachers.
    """

    CURRENT = "current"
    LEGACY = "legacy"


class DenyReason(_ValuesMixin, str, Enum):
    """Why a request was denied (never distinguishes missing from forbidden)."""

    UNAUTHENTICATED = "unauthenticated"
    MALFORMED_PATH = "malformed_path"
    GENERATION_DISABLED = "generation_disabled"
    NO_MATCH = "no_match"
    NO_GRANT = "no_grant"
    PREDICATES_FALSE = "predicates_false"
