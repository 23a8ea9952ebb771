"""Unit tests for the SQLite connection pool."""

import asyncio
from pathlib import Path

import aiosqlite
import pytest

from stockledger.config.settings import StorageSettings
from stockledger.infrastructure.storage.sqlite.connection import ConnectionPool


class TestConnectionPoolOpen:
    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path
        assert pool.size == 5
        assert pool.busy_timeout == 30000
        assert pool.is_open is False

    def test_from_settings(self, tmp_path: Path):
        storage = StorageSettings(
            data_dir=tmp_path, db_name="x.db", pool_size=2, busy_timeout=750
        )
        pool = ConnectionPool.from_settings(storage)
        assert pool.db_path == tmp_path / "x.db"
        assert pool.size == 2
        assert pool.busy_timeout == 750

    async def test_open_creates_directory(self, tmp_path: Path):
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        pool = ConnectionPool(db_path, size=1)

        await pool.open()
        assert db_path.parent.exists()
        await pool.close()

    async def test_open_is_idempotent(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, size=3)
        await pool.open()
        await pool.open()

        assert len(pool._conns) == 3
        assert pool._idle.qsize() == 3
        await pool.close()

    async def test_close_then_reopen_on_use(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, size=2)
        await pool.open()
        await pool.close()
        assert pool.is_open is False

        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        assert len(pool._conns) == 2
        await pool.close()


class TestConnectionPoolUsage:
    async def test_connections_use_wal_and_row_factory(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, size=1, busy_timeout=1234)
        async with pool.acquire() as conn:
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0].lower() == "wal"
            cursor = await conn.execute("PRAGMA busy_timeout")
            assert (await cursor.fetchone())[0] == 1234
            assert conn.row_factory is aiosqlite.Row
        await pool.close()

    async def test_transaction_commits(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, size=1)
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (x INTEGER)")
            await conn.execute("INSERT INTO t VALUES (1)")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 1
        await pool.close()

    async def test_transaction_rolls_back_on_error(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, size=1)
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (x INTEGER)")

        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("abort")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0
            assert conn.in_transaction is False
        await pool.close()

    async def test_connection_returned_after_cancel(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, size=1)
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (x INTEGER)")

        entered = asyncio.Event()

        async def stalled_write() -> None:
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                entered.set()
                await asyncio.Event().wait()

        task = asyncio.create_task(stalled_write())
        await entered.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0
        await pool.close()
