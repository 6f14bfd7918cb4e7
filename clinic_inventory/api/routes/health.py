"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from clinic_inventory import __version__
from clinic_inventory.application.dto.responses import HealthResponse
from clinic_inventory.config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Tests SQLite connectivity and response time.
    """
    from clinic_inventory.infrastructure.storage.sqlite import get_connection_pool

    try:
        pool = await get_connection_pool()
        start = time.time()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        latency = (time.time() - start) * 1000

    except Exception as e:
        logger.warning("db_health_check_failed", error=str(e))
        return HealthResponse(
            status="unhealthy",
            version=__version__,
            uptime_seconds=time.time() - _start_time,
            database="unavailable",
        )

    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database="sqlite",
        database_latency_ms=round(latency, 2),
    )
