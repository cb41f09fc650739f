"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from faktura import __version__
from faktura.api.dependencies import get_app_settings
from faktura.application.dto.responses import HealthResponse
from faktura.config import Settings, get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Service status, uptime and whether the automation secrets are set."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        automation_configured=bool(settings.automation.secret),
        webhook_configured=bool(settings.webhook.secret),
    )


@router.get("/db", response_model=HealthResponse)
async def db_health(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Database health check: runs a trivial query through the pool."""
    from faktura.infrastructure.storage.sqlite import get_pool

    database = "unavailable"
    try:
        pool = await get_pool()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        database = "ok"
    except Exception as e:
        logger.warning("db_health_failed", error=str(e))

    return HealthResponse(
        status="healthy" if database == "ok" else "unhealthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=database,
        automation_configured=bool(settings.automation.secret),
        webhook_configured=bool(settings.webhook.secret),
    )
