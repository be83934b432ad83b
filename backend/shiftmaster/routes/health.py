"""
ShiftMaster Backend — Service Info & Health Check Routes
==========================================================

What:  GET /        service banner (name, version, server time)
       GET /health  health probe for Docker and load balancers
How:   The health probe runs SELECT 1 against the database.

Status levels:
    healthy:   database reachable (HTTP 200)
    unhealthy: database unreachable (HTTP 503)
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Response

from shiftmaster import __version__
from shiftmaster.database import ping
from shiftmaster.schemas.dashboard import HealthResponse, ServiceInfoResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

SERVICE_NAME = "ShiftMaster API"

# Process start, for uptime reporting
_start_time = time.time()


@router.get(
    "/",
    response_model=ServiceInfoResponse,
    summary="Service information",
)
async def service_info() -> ServiceInfoResponse:
    return ServiceInfoResponse(
        status="ok",
        name=SERVICE_NAME,
        version=__version__,
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description=(
        "Returns the health status of the backend and its database. Used by "
        "Docker health checks and load balancers."
    ),
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
