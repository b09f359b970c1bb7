"""Application interfaces (ports): document store and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from taskmaster.infrastructure or taskmaster.api.
"""

from taskmaster.application.interfaces.repositories import IDocumentSnapshot, IDocumentStore
from taskmaster.application.interfaces.services import IAccessDecisionEngine

__all__ = [
    "IAccessDecisionEngine",
    "IDocumentSnapshot",
    "IDocumentStore",
]
