"""SQLite implementation of the persistence gateway."""

from collections.abc import Awaitable, Callable
from datetime import datetime
from decimal import Decimal
from typing import Any, TypeVar, cast

import aiosqlite
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from stockledger.config import get_logger, get_settings
from stockledger.core.entities.item import Item
from stockledger.core.entities.sale import SaleRecord
from stockledger.core.exceptions import DuplicateSkuError, PersistenceError
from stockledger.core.interfaces.persistence import IPersistenceGateway
from stockledger.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)

T = TypeVar("T")

_INSERT_ITEM = """
    INSERT INTO inventory (
        sku, name, quantity, cost_price, sell_price,
        category, location, min_stock
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""

_UPSERT_ITEM = _INSERT_ITEM + """\
    ON CONFLICT(sku) DO UPDATE SET
        name = excluded.name,
        quantity = excluded.quantity,
        cost_price = excluded.cost_price,
        sell_price = excluded.sell_price,
        category = excluded.category,
        location = excluded.location,
        min_stock = excluded.min_stock
"""

_INSERT_SALE = """
    INSERT INTO sales (sku, name, category, qty, price, timestamp)
    VALUES (?, ?, ?, ?, ?, ?)
"""


def _is_transient(exc: BaseException) -> bool:
    """Lock contention is worth retrying; anything else is not."""
    if not isinstance(exc, aiosqlite.OperationalError):
        return False
    message = str(exc).lower()
    return "locked" in message or "busy" in message


class SQLiteGateway(IPersistenceGateway):
    """Durable catalog and ledger storage backed by SQLite."""

    def __init__(
        self,
        pool: ConnectionPool | None = None,
        write_retries: int | None = None,
        retry_delay: float | None = None,
    ):
        settings = get_settings()
        self._pool = pool or ConnectionPool.from_settings(settings.storage)
        self._write_retries = (
            settings.storage.write_retries if write_retries is None else write_retries
        )
        self._retry_delay = (
            settings.storage.retry_delay if retry_delay is None else retry_delay
        )

    def _get_retry_decorator(self) -> Any:
        """Get tenacity retry decorator for transient lock errors."""
        return retry(
            stop=stop_after_attempt(max(self._write_retries, 1)),
            wait=wait_exponential(
                multiplier=self._retry_delay,
                min=self._retry_delay,
                max=self._retry_delay * 8,
            ),
            retry=retry_if_exception(_is_transient),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "persistence_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _run(self, operation: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Run ``fn`` with retries, translating driver errors to PersistenceError."""
        try:
            result = await self._get_retry_decorator()(fn)()
            return cast(T, result)
        except (aiosqlite.Error, OverflowError) as e:
            logger.error("persistence_failed", operation=operation, error=str(e))
            raise PersistenceError(operation, str(e)) from e

    async def load_all_items(self) -> list[Item]:
        """Load every persisted item, ordered by SKU."""

        async def _load() -> list[Item]:
            async with self._pool.acquire() as conn:
                cursor = await conn.execute("SELECT * FROM inventory ORDER BY sku")
                rows = await cursor.fetchall()
                return [self._row_to_item(row) for row in rows]

        return await self._run("load_all_items", _load)

    async def load_all_sales(self) -> list[SaleRecord]:
        """Load every persisted sale, ordered by sequence ascending."""

        async def _load() -> list[SaleRecord]:
            async with self._pool.acquire() as conn:
                cursor = await conn.execute("SELECT * FROM sales ORDER BY id")
                rows = await cursor.fetchall()
                return [self._row_to_sale(row) for row in rows]

        return await self._run("load_all_sales", _load)

    async def insert_item(self, item: Item) -> None:
        async def _insert() -> None:
            async with self._pool.transaction() as conn:
                try:
                    await conn.execute(_INSERT_ITEM, self._item_params(item))
                except aiosqlite.IntegrityError as e:
                    if "UNIQUE" not in str(e):
                        raise
                    raise DuplicateSkuError(item.sku) from e

        await self._run("insert_item", _insert)

    async def upsert_item(self, item: Item) -> None:
        async def _upsert() -> None:
            async with self._pool.transaction() as conn:
                await conn.execute(_UPSERT_ITEM, self._item_params(item))

        await self._run("upsert_item", _upsert)

    async def delete_item(self, sku: str) -> None:
        async def _delete() -> None:
            async with self._pool.transaction() as conn:
                await conn.execute("DELETE FROM inventory WHERE sku = ?", (sku,))

        await self._run("delete_item", _delete)

    async def append_sale(self, sale: SaleRecord) -> SaleRecord:
        async def _append() -> SaleRecord:
            async with self._pool.transaction() as conn:
                cursor = await conn.execute(_INSERT_SALE, self._sale_params(sale))
                return sale.model_copy(update={"sequence": cursor.lastrowid})

        return await self._run("append_sale", _append)

    async def record_sale(self, item: Item, sale: SaleRecord) -> SaleRecord:
        """Update the item's quantity and insert the sale in one transaction."""

        async def _record() -> SaleRecord:
            async with self._pool.transaction() as conn:
                cursor = await conn.execute(
                    "UPDATE inventory SET quantity = ? WHERE sku = ?",
                    (item.quantity, item.sku),
                )
                if cursor.rowcount != 1:
                    raise aiosqlite.IntegrityError(f"inventory row missing for {item.sku}")
                cursor = await conn.execute(_INSERT_SALE, self._sale_params(sale))
                return sale.model_copy(update={"sequence": cursor.lastrowid})

        record = await self._run("record_sale", _record)
        logger.debug("sale_persisted", sku=item.sku, sequence=record.sequence)
        return record

    async def close(self) -> None:
        await self._pool.close()

    @staticmethod
    def _item_params(item: Item) -> tuple:
        return (
            item.sku,
            item.name,
            item.quantity,
            str(item.cost_price),
            str(item.sell_price),
            item.category,
            item.location,
            item.min_stock,
        )

    @staticmethod
    def _sale_params(sale: SaleRecord) -> tuple:
        return (
            sale.sku,
            sale.name,
            sale.category,
            sale.quantity,
            str(sale.unit_price),
            sale.timestamp.isoformat(sep=" "),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> Item:
        """Convert a database row to an Item entity."""
        return Item(
            sku=row["sku"],
            name=row["name"],
            quantity=int(row["quantity"]),
            cost_price=Decimal(str(row["cost_price"])),
            sell_price=Decimal(str(row["sell_price"])),
            category=row["category"],
            location=row["location"],
            min_stock=int(row["min_stock"] or 0),
        )

    @staticmethod
    def _row_to_sale(row: aiosqlite.Row) -> SaleRecord:
        """Convert a database row to a SaleRecord entity."""
        return SaleRecord(
            sequence=row["id"],
            sku=row["sku"],
            name=row["name"],
            category=row["category"],
            quantity=int(row["qty"]),
            unit_price=Decimal(str(row["price"])),
            timestamp=datetime.fromisoformat(row["timestamp"]),
        )
