"""
aiosqlite connections for the ledger database.

The gateway owns one ConnectionPool. Connections are opened lazily on
first use and handed out one caller at a time; write transactions start
with ``BEGIN IMMEDIATE`` so the SQLite write lock is taken up front and
contention surfaces as ``database is locked`` within the busy timeout.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from stockledger.config import get_logger
from stockledger.config.settings import StorageSettings

logger = get_logger(__name__)

# Applied to every connection when it is opened
CONNECTION_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """Fixed-size set of connections to one SQLite file."""

    def __init__(self, db_path: Path, size: int = 5, busy_timeout: int = 30000):
        self.db_path = db_path
        self.size = size
        self.busy_timeout = busy_timeout
        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._conns: list[aiosqlite.Connection] = []
        self._opening = asyncio.Lock()

    @classmethod
    def from_settings(cls, storage: StorageSettings) -> "ConnectionPool":
        return cls(
            db_path=storage.db_path,
            size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
        )

    @property
    def is_open(self) -> bool:
        return bool(self._conns)

    async def open(self) -> None:
        """Open all connections; a no-op when already open."""
        async with self._opening:
            if self._conns:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.size):
                conn = await self._connect()
                self._conns.append(conn)
                self._idle.put_nowait(conn)
        logger.info("ledger_db_opened", db_path=str(self.db_path), connections=self.size)

    async def _connect(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        for pragma in CONNECTION_PRAGMAS:
            await conn.execute(pragma)
        await conn.execute(f"PRAGMA busy_timeout={int(self.busy_timeout)}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection for reads."""
        if not self._conns:
            await self.open()
        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection inside an immediate write transaction.

        Commits when the block exits normally. Any exception, cancellation
        included, rolls back before the connection goes back to the pool.
        """
        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise

    async def close(self) -> None:
        async with self._opening:
            while self._conns:
                await self._conns.pop().close()
            self._idle = asyncio.Queue()
        logger.info("ledger_db_closed", db_path=str(self.db_path))
