"""Pydantic request/response schemas for the API."""

from taskmaster.schemas.access import (
    AccessDecisionResponse,
    AccessRequestBody,
    BatchAccessDecisionResponse,
    BatchAccessRequestBody,
    RuleListItem,
    RuleListResponse,
    RuleTableResponse,
)
from taskmaster.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

__all__ = [
    "AccessDecisionResponse",
    "AccessRequestBody",
    "BatchAccessDecisionResponse",
    "BatchAccessRequestBody",
    "HealthResponse",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "RuleListItem",
    "RuleListResponse",
    "RuleTableResponse",
]
