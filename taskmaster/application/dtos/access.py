"""DTOs for access decisions (input and output of the decision engine)."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from taskmaster.domain.enums import DenyReason, Operation, RuleGeneration
from taskmaster.domain.value_objects.core import DocumentPath

PathInput = DocumentPath | str | Sequence[Sequence[str]]


@dataclass(frozen=True)
class AccessRequest:
    """One operation an actor wants to perform on one document.

    path is kept as given; the engine parses it so a malformed path becomes a
    deny decision instead of an exception at construction time.
    existing_document is resource.data (update/delete, optionally read);
    proposed_document is request.resource.data (create/update).
    """

    operation: Operation
    actor_id: str | None
    path: PathInput
    existing_document: dict[str, Any] | None = None
    proposed_document: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.operation, Operation):
            object.__setattr__(self, "operation", Operation(self.operation))


@dataclass(frozen=True)
class AccessDecision:
    """Allow/deny result. rule names the grant that allowed the request."""

    allowed: bool
    rule: str | None = None
    generation: RuleGeneration | None = None
    reason: DenyReason | None = None
    lookups: int = field(default=0, compare=False)

    @classmethod
    def allow(
        cls, rule: str, generation: RuleGeneration, lookups: int = 0
    ) -> "AccessDecision":
        return cls(True, rule=rule, generation=generation, lookups=lookups)

    @classmethod
    def deny(
        cls,
        reason: DenyReason,
        generation: RuleGeneration | None = None,
        lookups: int = 0,
    ) -> "AccessDecision":
        return cls(False, generation=generation, reason=reason, lookups=lookups)

    def __bool__(self) -> bool:
        return self.allowed
