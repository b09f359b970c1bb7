"""Access decision orchestration (implements IAccessDecisionEngine).

decide() is a pure function of the request and one store snapshot:
unauthenticated or malformed requests deny before any lookup, unmatched
paths deny (closed world), and otherwise the grants declared for the
operation are tried in order until one holds.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from taskmaster.application.dtos.access import AccessDecision, AccessRequest
from taskmaster.application.services.evaluation_context import (
    DEFAULT_MAX_LOOKUPS,
    EvaluationContext,
)
from taskmaster.application.services.predicate_evaluator import PredicateEvaluator
from taskmaster.domain.enums import DenyReason, Operation, RuleGeneration
from taskmaster.domain.exceptions import MalformedPathException
from taskmaster.domain.value_objects.core import DocumentPath
from taskmaster.shared.telemetry.tracing import add_span_attributes, traced

if TYPE_CHECKING:
    from taskmaster.application.interfaces.repositories import IDocumentStore
    from taskmaster.application.rules.registry import RuleSet

logger = logging.getLogger(__name__)


class AccessDecisionService:
    """Evaluates access requests against the current and legacy rule tables."""

    def __init__(
        self,
        rule_set: RuleSet,
        store: IDocumentStore,
        max_lookups: int = DEFAULT_MAX_LOOKUPS,
    ) -> None:
        self._rule_set = rule_set
        self._store = store
        self._max_lookups = max_lookups
        self._evaluators = {
            generation: PredicateEvaluator(rule_set.table(generation).helpers)
            for generation in RuleGeneration
        }

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    @traced("access.decide")
    async def decide(self, request: AccessRequest) -> AccessDecision:
        """Return allow iff the actor is set and one grant for the operation holds."""
        decision = await self._decide(request)
        add_span_attributes(
            **{
                "access.operation": request.operation.value,
                "access.allowed": decision.allowed,
                "access.reason": decision.reason.value if decision.reason else "",
                "access.lookups": decision.lookups,
            }
        )
        logger.debug(
            "Access %s %s -> %s (generation=%s rule=%s reason=%s lookups=%d)",
            request.operation.value,
            request.path,
            "allow" if decision.allowed else "deny",
            decision.generation.value if decision.generation else None,
            decision.rule,
            decision.reason.value if decision.reason else None,
            decision.lookups,
        )
        return decision

    async def decide_many(self, requests: list[AccessRequest]) -> list[AccessDecision]:
        """Evaluate independent requests concurrently, each with its own snapshot."""
        return list(await asyncio.gather(*(self.decide(r) for r in requests)))

    async def is_allowed(self, request: AccessRequest) -> bool:
        return (await self.decide(request)).allowed

    async def _decide(self, request: AccessRequest) -> AccessDecision:
        if not request.actor_id:
            return AccessDecision.deny(DenyReason.UNAUTHENTICATED)
        try:
            path = DocumentPath.coerce(request.path)
        except MalformedPathException:
            return AccessDecision.deny(DenyReason.MALFORMED_PATH)

        generation = self._rule_set.generation_for(path)
        if not self._rule_set.is_enabled(generation):
            return AccessDecision.deny(DenyReason.GENERATION_DISABLED, generation)

        match = self._rule_set.matcher(generation).match(path)
        if match is None:
            return AccessDecision.deny(DenyReason.NO_MATCH, generation)
        grants = match.grants_for(request.operation)
        if not grants:
            return AccessDecision.deny(DenyReason.NO_GRANT, generation)

        snapshot = await self._store.snapshot()
        existing = request.existing_document
        preloaded = {}
        if request.operation is not Operation.CREATE:
            if existing is None:
                existing = await snapshot.get_document(path)
            # get/exists on the target path must agree with resource.
            preloaded[path] = existing
        ctx = EvaluationContext(
            actor_id=request.actor_id,
            snapshot=snapshot,
            params=match.params,
            existing=existing,
            proposed=request.proposed_document,
            max_lookups=self._max_lookups,
            preloaded=preloaded,
        )
        evaluator = self._evaluators[generation]
        for grant in grants:
            if await evaluator.check(grant.condition, ctx):
                return AccessDecision.allow(grant.name, generation, ctx.lookup_count)
        return AccessDecision.deny(
            DenyReason.PREDICATES_FALSE, generation, ctx.lookup_count
        )
