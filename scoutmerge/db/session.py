"""Async database engine and session factory for ScoutMerge.

Usage:
    from scoutmerge.db.session import get_session

    async with get_session() as session:
        result = await session.execute(select(SubmissionRow))

IMPORTANT: Each request/operation must get its own session from the factory.
AsyncSession is NOT safe to share across concurrent coroutines or requests.

The engine is created lazily on first use from settings.database_url, so
importing this module never touches a database driver.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from scoutmerge.config import settings
from scoutmerge.db.models import Base

# Module-level lazy singletons, shared across the process lifetime
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def build_engine(database_url: str) -> AsyncEngine:
    """Create an async engine with pool settings suited to the backend.

    In-memory SQLite keeps a single shared connection, otherwise every new
    connection would see an empty database.
    """
    if database_url.startswith("sqlite"):
        if ":memory:" in database_url or database_url.endswith("://"):
            return create_async_engine(database_url, echo=False, poolclass=StaticPool)
        return create_async_engine(database_url, echo=False)
    return create_async_engine(
        database_url,
        echo=False,
        pool_size=10,
        max_overflow=20,
    )


def get_engine() -> AsyncEngine:
    global _engine, _session_factory
    if _engine is None:
        _engine = build_engine(settings.database_url)
        # expire_on_commit=False keeps ORM objects accessible after commit
        _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    get_engine()
    return _session_factory


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Async context manager that yields a fresh database session.

    The session is closed and its connection returned to the pool when the
    context exits, whether normally or via exception.
    """
    async with get_session_factory()() as session:
        yield session


async def init_models(engine: AsyncEngine | None = None) -> None:
    """Create all tables that do not exist yet (development and tests)."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose the engine and close pooled connections; next use recreates it."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
