"""Health & Readiness Probes — liveness and database readiness.

Invariants:
    - GET /api/health/ always returns 200 if the process is up (liveness)
    - GET /api/health/ready returns 503 unless the startup connect succeeded

Design Decisions:
    - Readiness reads the recorded ConnectionState instead of pinging per probe:
      the startup connect is fire-and-forget and this is where its outcome shows
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from app.core.domain_types import ConnectionState

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "chirp-api",
        "version": request.app.version,
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe: reports the database connection state."""
    database = request.app.state.database
    if database.state is not ConnectionState.CONNECTED:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "database": database.state.value,
                "reason": database.last_error,
            },
        )
    return {"status": "ready", "checks": {"database": database.state.value}}
