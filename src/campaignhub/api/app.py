"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from campaignhub import __version__
from campaignhub.api.middleware import (
    AuthenticationMiddleware,
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
)
from campaignhub.api.routers import health_router, v1_router
from campaignhub.config.settings import Settings, get_settings
from campaignhub.core.logging import get_logger, setup_logging
from campaignhub.db.config import close_db, create_all, init_db

logger = get_logger("campaignhub.api")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)

    Returns:
        Configured FastAPI application

    Example:
        # Production
        app = create_app()

        # Testing
        test_settings = Settings(ENVIRONMENT="test", API_SECRET_KEY=SecretStr("test"))
        app = create_app(settings=test_settings)

        # Run with uvicorn
        uvicorn campaignhub.api.app:create_app --factory
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="campaignhub API",
        description="Multi-tenant marketing campaign backend",
        version=__version__,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=_lifespan,
    )

    # Store settings on app state for access in middleware
    app.state.settings = settings

    _configure_middleware(app)
    _configure_routers(app)

    return app


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Set up logging and the database pool; dispose the pool on shutdown."""
    setup_logging()
    logger.info("Starting campaignhub API", version=__version__)

    settings = app.state.settings
    try:
        await init_db()
        logger.info("Database connection pool initialized")
        if settings.is_sqlite:
            # No migrations for local SQLite databases
            await create_all()
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database initialization skipped", error=str(e))

    yield

    logger.info("Shutting down campaignhub API")
    await close_db()


def _configure_middleware(app: FastAPI) -> None:
    """Configure middleware stack.

    Middleware order (outermost to innermost execution):
    1. RequestLoggingMiddleware - Assigns request id, logs all requests
    2. ErrorHandlingMiddleware - Converts exceptions to HTTP responses
    3. AuthenticationMiddleware - Validates Bearer token, sets the principal

    Starlette runs the last-added middleware first.
    """
    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)


def _configure_routers(app: FastAPI) -> None:
    # Health check endpoints (no prefix - at root level)
    app.include_router(health_router)
    app.include_router(v1_router)
