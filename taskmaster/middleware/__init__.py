"""HTTP middleware. Applied in taskmaster.main (last added = outermost)."""

from taskmaster.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
