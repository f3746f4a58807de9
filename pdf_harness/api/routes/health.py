"""
Health Routes
=============

Process health and renderer session health endpoints.
"""

import platform
import sys

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import psutil

from pdf_harness.api.dependencies import get_current_settings, get_runtime
from pdf_harness.config.logging import get_logger
from pdf_harness.config.settings import Settings
from pdf_harness.core.rendering.runtime import RenderingRuntime
from pdf_harness.models.schemas import HealthStatus, RendererHealthResponse

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


def get_memory_usage_mb() -> float:
    """Resident set size of this process in megabytes."""
    return round(psutil.Process().memory_info().rss / 1024 / 1024, 2)


@router.get("/health", response_model=HealthStatus)
async def health_check(settings: Settings = Depends(get_current_settings)) -> HealthStatus:
    """Process liveness plus runtime information. Never touches a browser."""
    return HealthStatus(
        status="ok",
        version=settings.app_version,
        architecture=platform.machine(),
        platform=sys.platform,
        runtime_version=platform.python_version(),
        memory_usage=get_memory_usage_mb(),
    )


@router.get(
    "/health/renderers",
    response_model=RendererHealthResponse,
    responses={503: {"model": RendererHealthResponse}},
)
async def renderer_health(runtime: RenderingRuntime = Depends(get_runtime)) -> JSONResponse:
    """
    Render a probe document with every engine.

    Returns 200 when every engine is healthy, 503 otherwise.
    """
    sessions = await runtime.health_checks()
    healthy = all(session.healthy for session in sessions)
    response = RendererHealthResponse(healthy=healthy, renderers=sessions)

    logger.info(
        "Renderer health check completed",
        healthy=healthy,
        engines={session.engine: session.healthy for session in sessions},
    )
    return JSONResponse(
        status_code=200 if healthy else 503,
        content=response.model_dump(mode="json", by_alias=True),
    )
