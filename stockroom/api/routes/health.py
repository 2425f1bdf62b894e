"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from stockroom import __version__
from stockroom.application.dto.responses import ComponentHealthResponse, HealthResponse

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


async def check_database() -> ComponentHealthResponse:
    """Run a trivial query against the pool and time it."""
    from stockroom.infrastructure.storage.sqlite import get_pool

    try:
        pool = await get_pool()
        start = time.time()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        return ComponentHealthResponse(
            status="healthy",
            latency_ms=(time.time() - start) * 1000,
        )
    except Exception as e:
        return ComponentHealthResponse(status="unhealthy", error=str(e))


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
    db_status = await check_database()
    return HealthResponse(
        status=db_status.status,
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
