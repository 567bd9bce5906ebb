"""Database dependency injection for FastAPI.

Provides async session factories for read and write operations backed by
lazily created singleton engines.
"""

from __future__ import annotations

import threading
from collections.abc import AsyncGenerator, Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_read_engine, create_write_engine
from infrastructure.database.exceptions import DatabaseConnectionError
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import DatabaseSettings, get_database_settings

WRITE = "write"
READ = "read"

_FACTORIES: dict[str, Callable[[DatabaseSettings], AsyncEngine]] = {
    WRITE: create_write_engine,
    READ: create_read_engine,
}

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Engines and their sessionmakers, created on first use
_engines: dict[str, AsyncEngine] = {}
_sessionmakers: dict[str, async_sessionmaker[AsyncSession]] = {}

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()


def _get_sessionmaker(role: str) -> async_sessionmaker[AsyncSession]:
    """Get (creating on first call) the sessionmaker for an engine role.

    Uses double-check locking for thread-safe initialization.
    """
    if role not in _sessionmakers:
        with _engine_lock:
            if role not in _sessionmakers:
                settings = get_database_settings()
                engine = _FACTORIES[role](settings)
                _engines[role] = engine
                _sessionmakers[role] = async_sessionmaker(
                    engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.engine_created(
                    role=role,
                    host=settings.host,
                    database=settings.database,
                    pool_size=settings.pool_min_connections,
                )
    return _sessionmakers[role]


def get_write_engine() -> AsyncEngine:
    """Get the write database engine (singleton)."""
    _get_sessionmaker(WRITE)
    return _engines[WRITE]


def get_read_engine() -> AsyncEngine:
    """Get the read database engine (singleton)."""
    _get_sessionmaker(READ)
    return _engines[READ]


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a write session for mutations (FastAPI dependency).

    The session does not auto-commit. Application services open the
    transaction themselves, one per use case.

    Yields:
        AsyncSession for database operations
    """
    async with _get_sessionmaker(WRITE)() as session:
        yield session


async def get_read_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a read-only session for queries (FastAPI dependency).

    Not enforced at the database level; only query endpoints depend on it.

    Yields:
        AsyncSession for read-only database operations
    """
    async with _get_sessionmaker(READ)() as session:
        yield session


async def ping_database(session: AsyncSession) -> None:
    """Run a trivial query to prove the database answers.

    Raises:
        DatabaseConnectionError: If the query fails for any reason
    """
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        _probe.health_check_failed(e)
        raise DatabaseConnectionError(str(e)) from e


async def close_database_connections() -> None:
    """Close all database engine connections.

    Should be called on application shutdown to properly cleanup connections.
    Also resets sessionmakers to allow reinitialization.
    """
    for role in list(_engines):
        engine = _engines.pop(role)
        _sessionmakers.pop(role, None)
        await engine.dispose()
        _probe.engine_disposed(role)
