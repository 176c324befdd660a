"""
Resourceful — Health Check Route
=================================

What:  GET /health for load balancer probes and monitoring.
How:   Reports the library version, the registered resource names and the
       uptime. The API instance is read from app.state, where create_app()
       puts it.
"""

import logging
import time

from fastapi import APIRouter, Request

from resourceful import __version__
from resourceful.schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    api = getattr(request.app.state, "api", None)
    resources = [resource.name for resource in api.resources] if api is not None else []
    return HealthResponse(
        status="healthy",
        version=__version__,
        resources=resources,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
