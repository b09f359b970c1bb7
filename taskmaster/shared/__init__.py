"""Shared utilities: request context and telemetry.

Used by application, infrastructure and the HTTP layer. No business logic.
"""

from taskmaster.shared.context import get_request_id, reset_request_id, set_request_id

__all__ = [
    "get_request_id",
    "reset_request_id",
    "set_request_id",
]
