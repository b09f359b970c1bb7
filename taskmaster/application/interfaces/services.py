"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from taskmaster.application.dtos.access import AccessDecision, AccessRequest
    from taskmaster.application.rules.registry import RuleSet


class IAccessDecisionEngine(Protocol):
    """Protocol for the access decision engine consumed by callers (API, scripts)."""

    @property
    def rule_set(self) -> RuleSet:
        """Rule tables the engine evaluates against."""

    async def decide(self, request: AccessRequest) -> AccessDecision:
        """Return allow/deny for one request. Never raises for authorization failures."""

    async def decide_many(self, requests: list[AccessRequest]) -> list[AccessDecision]:
        """Evaluate independent requests; results are in request order."""
