import os
from collections.abc import AsyncGenerator, Callable
from typing import Any
from unittest.mock import MagicMock

# Settings are read at import time; point them at throwaway backends first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "admin123")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from cafe_backend.config import settings
from cafe_backend.core.redis_client import get_redis_client
from cafe_backend.database import get_db
from cafe_backend.main import app
from cafe_backend.models import metadata
from cafe_backend.services.admin_service import AdminService
from cafe_backend.services.auth_service import AuthService
from cafe_backend.services.bootstrap_service import initialize_database
from cafe_backend.services.staff_service import StaffService

TEST_DATABASE_URL = "sqlite+aiosqlite://"

DEFAULT_PASSWORD = "secret123"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a fresh in-memory database with seeded reference data.

    One connection is shared by every session so they all see the same
    in-memory database. Connections are not reset when returned to the
    pool, otherwise closing one session would roll back another's
    uncommitted work.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        pool_reset_on_return=None,
        connect_args={"check_same_thread": False},
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        await initialize_database(session)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def redis_store() -> dict[str, str]:
    """Backing store for the fake Redis client."""
    return {}


@pytest.fixture
def mock_redis(redis_store: dict[str, str]) -> MagicMock:
    """Redis client double that keeps keys in a dict."""
    client = MagicMock()
    client.get.side_effect = redis_store.get
    client.set.side_effect = lambda key, value: redis_store.__setitem__(key, value)
    client.setex.side_effect = lambda key, ttl, value: redis_store.__setitem__(key, value)
    client.delete.side_effect = lambda key: redis_store.pop(key, None)
    client.exists.side_effect = lambda key: int(key in redis_store)
    client.ping.return_value = True
    return client


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    mock_redis: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = lambda: mock_redis

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def staff_payload() -> Callable[..., dict[str, Any]]:
    """Build a valid staff creation payload, overriding any field."""
    counter = {"n": 0}

    def _build(**overrides: Any) -> dict[str, Any]:
        counter["n"] += 1
        n = counter["n"]
        payload = {
            "role": "Barista",
            "first_name": "Alex",
            "last_name": "Brewer",
            "email": f"staff{n}@maplecafe.com",
            "phone": "+1 555 0100",
            "password": DEFAULT_PASSWORD,
        }
        payload.update(overrides)
        return payload

    return _build


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> dict:
    """The bootstrap administrator created at start-up."""
    admin = await AdminService.get_admin_credentials(db_session, settings.admin_username)
    assert admin is not None
    return admin


@pytest.fixture
def admin_token(admin_user: dict) -> str:
    """Access token for the bootstrap administrator."""
    return AuthService().create_token(admin_user["id"], admin_user["username"], "admin")


@pytest_asyncio.fixture
async def manager(db_session: AsyncSession, staff_payload: Callable[..., dict]) -> dict:
    """A staff member with the Manager role."""
    return await StaffService().create_staff(
        db_session,
        staff_payload(role="Manager", first_name="Morgan", last_name="Lead"),
    )


@pytest.fixture
def manager_token(manager: dict) -> str:
    """Access token for the manager."""
    return AuthService().create_token(
        manager["id"], manager["staff_id"], "staff", role=manager["role"]
    )


@pytest_asyncio.fixture
async def barista(db_session: AsyncSession, staff_payload: Callable[..., dict]) -> dict:
    """A staff member with the Barista role."""
    return await StaffService().create_staff(
        db_session,
        staff_payload(role="Barista", first_name="Jamie", last_name="Pour", username="jamie.p"),
    )


@pytest.fixture
def barista_token(barista: dict) -> str:
    """Access token for the barista."""
    return AuthService().create_token(
        barista["id"], barista["staff_id"], "staff", role=barista["role"]
    )
