"""Application DTOs (no framework dependency)."""

from taskmaster.application.dtos.access import AccessDecision, AccessRequest, PathInput

__all__ = [
    "AccessDecision",
    "AccessRequest",
    "PathInput",
]
