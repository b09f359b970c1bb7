"""Application layer: rule tables, decision services, interfaces, DTOs.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (document stores).
"""

from taskmaster.application.dtos import AccessDecision, AccessRequest
from taskmaster.application.interfaces import (
    IAccessDecisionEngine,
    IDocumentSnapshot,
    IDocumentStore,
)
from taskmaster.application.services.access_decision_service import AccessDecisionService

__all__ = [
    "AccessDecision",
    "AccessDecisionService",
    "AccessRequest",
    "IAccessDecisionEngine",
    "IDocumentSnapshot",
    "IDocumentStore",
]
