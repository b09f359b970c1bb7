"""Presentation-layer dependency injection.

The decision service is built once in the lifespan (composition root) and
read from app.state here; tests assign app.state.decision_service directly
to inject a service over a seeded in-memory store.
"""

from fastapi import Request

from taskmaster.application.interfaces.services import IAccessDecisionEngine
from taskmaster.domain.exceptions import ConfigurationException


def get_decision_service(request: Request) -> IAccessDecisionEngine:
    service = getattr(request.app.state, "decision_service", None)
    if service is None:
        raise ConfigurationException("Decision service not initialized")
    return service
