"""Access decision API: thin routes delegating to AccessDecisionService."""

from typing import Annotated

from fastapi import APIRouter, Depends

from taskmaster.api.v1.dependencies import get_decision_service
from taskmaster.application.interfaces.services import IAccessDecisionEngine
from taskmaster.domain.enums import RuleGeneration
from taskmaster.schemas.access import (
    AccessDecisionResponse,
    AccessRequestBody,
    BatchAccessDecisionResponse,
    BatchAccessRequestBody,
    RuleListItem,
    RuleListResponse,
    RuleTableResponse,
)

router = APIRouter()

DecisionService = Annotated[IAccessDecisionEngine, Depends(get_decision_service)]


@router.post("/decisions", response_model=AccessDecisionResponse)
async def decide(
    body: AccessRequestBody,
    service: DecisionService,
) -> AccessDecisionResponse:
    """Evaluate one request. Denials are 200 with allowed=false."""
    decision = await service.decide(body.to_request())
    return AccessDecisionResponse.from_decision(decision)


@router.post("/decisions/batch", response_model=BatchAccessDecisionResponse)
async def decide_batch(
    body: BatchAccessRequestBody,
    service: DecisionService,
) -> BatchAccessDecisionResponse:
    """Evaluate independent requests concurrently; results keep request order."""
    decisions = await service.decide_many([r.to_request() for r in body.requests])
    return BatchAccessDecisionResponse(
        decisions=[AccessDecisionResponse.from_decision(d) for d in decisions]
    )


@router.get("/rules", response_model=RuleListResponse)
def list_rules(service: DecisionService) -> RuleListResponse:
    """List both rule generations (pattern, operation, grant names)."""
    rule_set = service.rule_set
    tables = []
    for generation in RuleGeneration:
        table = rule_set.table(generation)
        tables.append(
            RuleTableResponse(
                generation=generation,
                enabled=rule_set.is_enabled(generation),
                collections=sorted(table.top_level_collections),
                rules=[RuleListItem(**entry) for entry in table.describe()],
            )
        )
    return RuleListResponse(tables=tables)
