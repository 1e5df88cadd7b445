"""Health check endpoints."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from campaignhub import __version__
from campaignhub.api.dependencies import SessionDep
from campaignhub.api.schemas.health import DatabaseHealthResponse, HealthResponse, HealthStatus

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Basic health check",
    description="Returns basic liveness status. No authentication required.",
)
async def health_check() -> HealthResponse:
    """Liveness check; does not touch the database."""
    return HealthResponse(
        status=HealthStatus.HEALTHY,
        version=__version__,
        timestamp=datetime.now(UTC),
    )


@router.get(
    "/health/db",
    response_model=DatabaseHealthResponse,
    summary="Database health check",
    description="Checks database connectivity. No authentication required.",
)
async def health_db(db: SessionDep) -> DatabaseHealthResponse:
    """Database connectivity check with round-trip latency."""
    start = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return DatabaseHealthResponse(
            status=HealthStatus.UNHEALTHY,
            version=__version__,
            timestamp=datetime.now(UTC),
            message=type(e).__name__,
        )

    return DatabaseHealthResponse(
        status=HealthStatus.HEALTHY,
        version=__version__,
        timestamp=datetime.now(UTC),
        latency_ms=round((time.perf_counter() - start) * 1000, 2),
    )
