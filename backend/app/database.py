"""
Bookstore Backend — Database Session Management
=================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Transaction Model:
    One request = one session = one outer transaction.
    Services flush (never commit) so generated ids are available immediately.
    Write routes call commit_session() before building their response, so a
    failed commit is reported to the client; the dependency's own commit
    after the handler is then a no-op. Attachment inserts use SAVEPOINTs
    inside that transaction (see AttachmentService).
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings
from app.exceptions import DatabaseError

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    """Pool options for server databases; SQLite picks its own pool class."""
    options: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: returned ORM objects stay readable after commit,
# which the routes rely on when serializing the created account
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object used by Alembic and by the test suite's
    `create_all` call.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.post("/login")
        async def login(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def commit_session(db: AsyncSession) -> None:
    """
    Commit the request transaction while the handler is still running.

    The dependency teardown may run after the response has been sent, so
    write routes commit here first.

    Raises:
        DatabaseError: the commit was rejected; the session is rolled back.
    """
    try:
        await db.commit()
    except SQLAlchemyError as e:
        logger.error("Commit failed: %s", str(e))
        await db.rollback()
        raise DatabaseError(
            message="Could not commit the transaction",
            detail=str(getattr(e, "orig", None) or e),
            context={"error_type": type(e).__name__},
        ) from e


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Closes all pooled connections; called from the lifespan shutdown."""
    await engine.dispose()
