"""Pytest fixtures for campaignhub tests."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime

import pytest
import pytest_asyncio
import structlog
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from campaignhub.config.settings import Settings
from campaignhub.core.access import TenantAccessGuard
from campaignhub.core.encryption import Encryptor, generate_key, key_to_string
from campaignhub.core.principal import Principal
from campaignhub.db.models.base import Base
from campaignhub.db.storage.client import StorageClient, create_storage_client
from campaignhub.services import WorkspaceService

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


# =============================================================================
# Structlog Configuration Fixture
# =============================================================================


@pytest.fixture(scope="function", autouse=True)
def reset_structlog_after_test():
    """Reset structlog configuration after each test.

    This ensures tests that modify structlog global state
    don't affect other tests.
    """
    yield
    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Database fixtures
# =============================================================================


@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite engine with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock():
    """Deterministic clock for soft-delete timestamps."""
    return lambda: FIXED_NOW


@pytest.fixture
def client(db_session: AsyncSession, clock) -> StorageClient:
    """Storage client with the production middleware chain."""
    return create_storage_client(db_session, clock=clock)


@pytest.fixture
def raw_client(db_session: AsyncSession) -> StorageClient:
    """Storage client without any middleware, for inspecting stored rows."""
    return StorageClient(db_session)


@pytest.fixture
def guard(client: StorageClient) -> TenantAccessGuard:
    return TenantAccessGuard(client)


@pytest.fixture
def encryptor() -> Encryptor:
    return Encryptor(generate_key())


# =============================================================================
# Principals and workspaces
# =============================================================================


@pytest.fixture
def alice() -> Principal:
    """Member of workspace A."""
    return Principal(subject="user-alice", email="alice@example.com")


@pytest.fixture
def bob() -> Principal:
    """Member of workspace B."""
    return Principal(subject="user-bob", email="bob@example.com")


@pytest.fixture
def outsider() -> Principal:
    """Principal without any workspace membership."""
    return Principal(subject="user-outsider")


@pytest_asyncio.fixture
async def workspace_a(client: StorageClient, guard: TenantAccessGuard, alice: Principal):
    """Workspace owned by alice."""
    return await WorkspaceService(client, guard).create({"name": "Acme Marketing"}, alice)


@pytest_asyncio.fixture
async def workspace_b(client: StorageClient, guard: TenantAccessGuard, bob: Principal):
    """Workspace owned by bob."""
    return await WorkspaceService(client, guard).create({"name": "Globex Growth"}, bob)


# =============================================================================
# API test fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Create settings for API testing."""
    return Settings(
        API_SECRET_KEY=SecretStr("test-api-secret"),
        ENCRYPTION_KEY=SecretStr(key_to_string(generate_key())),
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        ENVIRONMENT="test",
        DEBUG=True,
        log_level="DEBUG",
    )


@pytest.fixture
def test_app(test_settings: Settings, db_session: AsyncSession) -> FastAPI:
    """Create a FastAPI test application bound to the test session."""
    from campaignhub.api.app import create_app
    from campaignhub.db.config import get_db

    app = create_app(settings=test_settings)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest_asyncio.fixture
async def test_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for API testing.

    Provides an httpx.AsyncClient configured to call the test application
    directly without network overhead.
    """
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def auth_headers(test_settings: Settings):
    """Build request headers authenticating as the given principal."""

    def _headers(principal: Principal) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {test_settings.API_SECRET_KEY.get_secret_value()}",
            "X-User-ID": principal.subject,
        }

    return _headers
