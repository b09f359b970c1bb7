"""Access decision API schemas."""

from typing import Any

from pydantic import BaseModel, Field

from taskmaster.application.dtos.access import AccessDecision, AccessRequest
from taskmaster.core.constants import MAX_BATCH_REQUESTS
from taskmaster.domain.enums import DenyReason, Operation, RuleGeneration


class AccessRequestBody(BaseModel):
    """Request body for one access decision.

    path is either the slash form ("classes/c1/members/u1") or a list of
    [collection, document id] pairs. A malformed path is not a validation
    error: it yields a deny decision with reason malformed_path.
    """

    operation: Operation
    actor_id: str | None = Field(
        default=None, description="Authenticated actor; null means unauthenticated"
    )
    path: str | list[list[str]] = Field(..., description="Target document path")
    existing_document: dict[str, Any] | None = Field(
        default=None,
        description="Stored document data; loaded from the store when omitted",
    )
    proposed_document: dict[str, Any] | None = Field(
        default=None, description="Document data after the write (create/update)"
    )

    def to_request(self) -> AccessRequest:
        path = self.path if isinstance(self.path, str) else tuple(map(tuple, self.path))
        return AccessRequest(
            operation=self.operation,
            actor_id=self.actor_id,
            path=path,
            existing_document=self.existing_document,
            proposed_document=self.proposed_document,
        )


class AccessDecisionResponse(BaseModel):
    """Decision for one request. A deny is still a 200 response."""

    allowed: bool
    rule: str | None = Field(default=None, description="Grant that allowed the request")
    generation: RuleGeneration | None = None
    reason: DenyReason | None = Field(default=None, description="Why it was denied")

    @classmethod
    def from_decision(cls, decision: AccessDecision) -> "AccessDecisionResponse":
        return cls(
            allowed=decision.allowed,
            rule=decision.rule,
            generation=decision.generation,
            reason=decision.reason,
        )


class BatchAccessRequestBody(BaseModel):
    """Independent requests evaluated concurrently."""

    requests: list[AccessRequestBody] = Field(
        ..., min_length=1, max_length=MAX_BATCH_REQUESTS
    )


class BatchAccessDecisionResponse(BaseModel):
    """Decisions in request order."""

    decisions: list[AccessDecisionResponse]


class RuleListItem(BaseModel):
    pattern: str
    operation: Operation
    grants: list[str]


class RuleTableResponse(BaseModel):
    """One rule generation as listed by GET /access/rules."""

    generation: RuleGeneration
    enabled: bool
    collections: list[str] = Field(..., description="Top-level collections it serves")
    rules: list[RuleListItem]


class RuleListResponse(BaseModel):
    tables: list[RuleTableResponse]
