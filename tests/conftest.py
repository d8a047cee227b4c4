"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ADMIN_IDENTITY"] = "0xADMIN000000000000000000000000000000000001"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenCaller
from infrastructure.database.models import Base


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_IDENTITY = os.environ["ADMIN_IDENTITY"]
ALICE = "0xA11CE00000000000000000000000000000000001"
BOB = "0xB0B0000000000000000000000000000000000002"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def make_headers(auth_provider: JWTAuthProvider):  # type: ignore[no-untyped-def]
    """Build authorization headers for any identity."""

    def _make(identity: str) -> dict[str, str]:
        token = auth_provider.create_token(TokenCaller(identity=identity))
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def alice_headers(make_headers) -> dict[str, str]:  # type: ignore[no-untyped-def]
    return make_headers(ALICE)  # type: ignore[no-any-return]


@pytest.fixture
def bob_headers(make_headers) -> dict[str, str]:  # type: ignore[no-untyped-def]
    return make_headers(BOB)  # type: ignore[no-any-return]


@pytest.fixture
def admin_headers(make_headers) -> dict[str, str]:  # type: ignore[no-untyped-def]
    return make_headers(ADMIN_IDENTITY)  # type: ignore[no-any-return]


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def registry_client(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client backed by a fresh registry.

    This client:
    - Uses an in-memory SQLite database
    - Starts from an empty profile store
    - Overrides the auth provider to the test signing key
    - Overrides the profile service to use the test session factory
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import get_profile_service
    from domain.registry.profile_store import ProfileStore
    from domain.services.access_policy import AdminAccessPolicy
    from domain.services.profile_service import ProfileService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    service = ProfileService(
        ProfileStore(),
        test_uow_factory,
        access_policy=AdminAccessPolicy(ADMIN_IDENTITY),
    )

    def override_get_auth_provider() -> JWTAuthProvider:
        return auth_provider

    def override_get_profile_service() -> ProfileService:
        return service

    app.dependency_overrides[get_auth_provider] = override_get_auth_provider
    app.dependency_overrides[get_profile_service] = override_get_profile_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
