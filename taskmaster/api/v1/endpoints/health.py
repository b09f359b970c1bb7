"""Health check endpoints: liveness and readiness probes."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from taskmaster.core.config import get_settings
from taskmaster.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Decision service not wired", "model": ReadinessErrorResponse}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 once the lifespan has built the rule tables and the store.

    Does not touch Firestore: a slow store should fail decisions (503), not
    take the instance out of rotation.
    """
    if getattr(request.app.state, "decision_service", None) is None:
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(
                message="Decision service not initialized"
            ).model_dump(),
        )
    return ReadinessResponse(backend=get_settings().document_store_backend)
