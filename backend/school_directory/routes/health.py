"""
School Directory — Health Check Route
=======================================

What:  GET /health, a constant acknowledgement for probes.
How:   Touches no dependency; if the process answers, it is up.
"""

import time

from fastapi import APIRouter

from school_directory import __version__
from school_directory.schemas.school import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="API is running",
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
