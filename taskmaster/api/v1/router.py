"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Routes get
the decision service from taskmaster.api.v1.dependencies.
"""

from fastapi import APIRouter

from taskmaster.api.v1.endpoints import access, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(access.router, prefix="/access", tags=["access"])
