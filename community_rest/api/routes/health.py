"""Service Health — liveness and readiness for the community REST API.

Invariants:
    - Liveness never touches the database
    - Readiness is 503 unless the database answers and the members and
      notifications tables are queryable
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from community_rest.config import Settings, get_settings
import community_rest.infrastructure.database as database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "community-rest"
SERVICE_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness(settings: Settings = Depends(get_settings)):
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "namespace": settings.api_namespace,
    }


@router.get("/ready")
async def readiness():
    """Database reachable and both resource tables present."""
    manager = database.db_manager
    if manager is None:
        checks = {"database": False}
    else:
        checks = await manager.readiness_checks()
    failing = sorted(name for name, ok in checks.items() if not ok)
    if failing:
        logger.warning("Readiness check failed", extra={"operation": "readiness"})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "failing": failing},
        )
    return {"status": "ready", "checks": {name: "healthy" for name in checks}}
