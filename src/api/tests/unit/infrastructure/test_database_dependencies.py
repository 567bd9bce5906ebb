"""Unit tests for database dependency injection.

Tests the FastAPI dependency providers for async database sessions.
"""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_engine,
    get_read_session,
    get_write_engine,
    get_write_session,
    ping_database,
)
from infrastructure.database.exceptions import DatabaseConnectionError


@pytest_asyncio.fixture(autouse=True)
async def dispose_engines():
    """Start and end every test without cached engines."""
    await close_database_connections()
    yield
    await close_database_connections()


@pytest.mark.asyncio
async def test_get_write_engine():
    """Test that get_write_engine returns an AsyncEngine."""
    engine = get_write_engine()

    assert isinstance(engine, AsyncEngine)
    assert engine.url.drivername == "postgresql+asyncpg"


@pytest.mark.asyncio
async def test_get_read_engine():
    """Test that get_read_engine returns an AsyncEngine."""
    engine = get_read_engine()

    assert isinstance(engine, AsyncEngine)
    assert engine.url.drivername == "postgresql+asyncpg"


@pytest.mark.asyncio
async def test_engines_are_singletons():
    """Test that engines are cached and reused."""
    assert get_write_engine() is get_write_engine()
    assert get_read_engine() is get_read_engine()
    assert get_write_engine() is not get_read_engine()


@pytest.mark.asyncio
async def test_write_session_uses_write_engine():
    """Test that write session is bound to write engine."""
    write_engine = get_write_engine()

    async for session in get_write_session():
        assert isinstance(session, AsyncSession)
        assert session.bind.sync_engine is write_engine.sync_engine


@pytest.mark.asyncio
async def test_read_session_uses_read_engine():
    """Test that read session is bound to read engine."""
    read_engine = get_read_engine()

    async for session in get_read_session():
        assert isinstance(session, AsyncSession)
        assert session.bind.sync_engine is read_engine.sync_engine


@pytest.mark.asyncio
async def test_sessions_do_not_autostart_transactions():
    """Services open the transaction themselves."""
    session_count = 0

    async for session in get_write_session():
        session_count += 1
        assert not session.in_transaction()

    assert session_count == 1


@pytest.mark.asyncio
async def test_close_database_connections():
    """Test that close_database_connections disposes engines."""
    write_engine = get_write_engine()
    read_engine = get_read_engine()

    await close_database_connections()

    assert get_write_engine() is not write_engine
    assert get_read_engine() is not read_engine


class TestPingDatabase:
    """Tests for the database health check."""

    @pytest.mark.asyncio
    async def test_succeeds_when_query_runs(self):
        session = AsyncMock()

        await ping_database(session)

        session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_wraps_driver_failure(self):
        session = AsyncMock()
        session.execute.side_effect = OSError("connection refused")

        with pytest.raises(DatabaseConnectionError, match="connection refused"):
            await ping_database(session)
