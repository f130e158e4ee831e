"""Health Probes — liveness and readiness for the HirePath API.

Invariants:
    - /health/ answers 200 whenever the process is serving
    - /health/ready answers 503 until the database round-trips
    - Both paths are public in the route table, so probes never get redirected
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.infrastructure import database as db_module

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE = {"service": "hirepath-api", "version": "1.0.0"}


async def _probe_database() -> bool:
    manager = db_module.db_manager
    if manager is None:
        return False
    return await manager.health_check()


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", **SERVICE}


@router.get("/ready")
async def readiness_check():
    if await _probe_database():
        return {"status": "ready", **SERVICE, "checks": {"database": "healthy"}}

    logger.warning("Readiness probe failed: database unreachable")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "not_ready", **SERVICE,
            "reason": "database_unavailable",
            "checks": {"database": "unreachable"},
        },
    )
