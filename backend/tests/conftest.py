"""
Bookstore Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession (no real DB needed)
    ├── sample_registration: Valid UserRegData
    ├── db_engine: In-memory aiosqlite engine with all tables created
    ├── db_session_factory: Session factory bound to db_engine
    └── test_client: HTTPX AsyncClient wired to the app, using db_engine
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ENFORCE_UNIQUE_EMAIL"] = "false"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.database import Base, get_db_session
from app.schemas.user import UserRegData


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures (mocked persistence)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    begin_nested() returns a MagicMock, which supports `async with` and
    does not swallow exceptions (its __aexit__ returns False).

    Usage:
        async def test_find(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.begin_nested = MagicMock()
    return session


@pytest.fixture
def sample_registration():
    return UserRegData(
        first_name="Ada",
        last_name="Lovelace",
        email="a@x.com",
        password="secret",
        contact_id=42,
    )


# ══════════════════════════════════════════════════════════════════════════
# Integration Fixtures (real SQLAlchemy on in-memory SQLite)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    A fresh in-memory database per test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_client(db_session_factory):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    get_db_session is overridden so requests use the per-test database,
    with the same commit/rollback semantics as production.

    Usage:
        async def test_login(test_client):
            response = await test_client.post("/login", json={...})
    """
    from app.main import app

    async def override_get_db_session():
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
