"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from stockledger.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteGateway,
    initialize_database,
)


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def seeded_db(temp_db_path: Path) -> Path:
    """Migrated database holding the example items."""
    await initialize_database(temp_db_path, seed=True)
    return temp_db_path


@pytest.fixture
async def empty_db(temp_db_path: Path) -> Path:
    """Migrated database with no rows."""
    await initialize_database(temp_db_path, seed=False)
    return temp_db_path


@pytest.fixture
async def pool(seeded_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    connection_pool = ConnectionPool(seeded_db, size=2, busy_timeout=1000)
    await connection_pool.open()
    yield connection_pool
    await connection_pool.close()


@pytest.fixture
def gateway(pool: ConnectionPool) -> SQLiteGateway:
    return SQLiteGateway(pool=pool, write_retries=2, retry_delay=0.001)
