"""
Inventory ledger engine.

Authorization and atomicity layer over the item catalog and the sales
ledger. Callers go through the engine rather than the catalog or
ledger directly: it checks the role policy first, then the invariants, and
holds a per-SKU lock across each read-modify-write so concurrent calls on
one SKU serialize while different SKUs proceed independently.

Mutations are persisted before the in-memory state changes. A sale's
quantity decrement and its ledger record are committed by the gateway in a
single transaction and applied to memory together with no await in
between, so readers never see one without the other.
"""

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, TypeVar

from stockledger.config import get_logger
from stockledger.core.entities.item import Item, ItemFields
from stockledger.core.entities.report import CategoryTotals, StockSummary
from stockledger.core.entities.role import Operation, Role
from stockledger.core.entities.sale import SaleOutcome, SaleRecord
from stockledger.core.exceptions import InsufficientStockError, InvalidFieldError
from stockledger.core.interfaces.persistence import IPersistenceGateway
from stockledger.core.services.catalog import ItemCatalog, require_sku
from stockledger.core.services.role_policy import require
from stockledger.core.services.sales_ledger import SalesLedger, build_sale
from stockledger.core.services.sku_allocator import SkuAllocator

logger = get_logger(__name__)

T = TypeVar("T")

UNCATEGORIZED = "Uncategorized"


async def _run_to_completion(coro: Coroutine[Any, Any, T]) -> T:
    """Await ``coro`` in its own task and let it finish even if we are cancelled.

    A commit that reached the database must also reach memory, and the caller's
    SKU lock has to stay held until it has. Cancellation is re-raised once the
    task is done.
    """
    task = asyncio.ensure_future(coro)
    cancelled = False
    while not task.done():
        try:
            await asyncio.wait([task])
        except asyncio.CancelledError:
            cancelled = True
    if cancelled:
        error = None if task.cancelled() else task.exception()
        raise asyncio.CancelledError from error
    return task.result()


class InventoryLedgerEngine:
    """Orchestrates create, restock, sell, delete and the reports."""

    def __init__(
        self,
        gateway: IPersistenceGateway,
        allocator: SkuAllocator | None = None,
    ):
        self._gateway = gateway
        self.catalog = ItemCatalog(gateway)
        self.ledger = SalesLedger(gateway)
        self.allocator = allocator or SkuAllocator()
        # Locks exist only while some call holds or waits on them
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    async def load(self) -> None:
        """Load catalog and ledger state from the gateway."""
        items = await self._gateway.load_all_items()
        sales = await self._gateway.load_all_sales()
        self.catalog.load(items)
        self.ledger.load(sales)
        # Deleted SKUs live on in the ledger and must not be handed out again
        self.allocator.observe(item.sku for item in items)
        self.allocator.observe(sale.sku for sale in sales)
        logger.info(
            "engine_loaded",
            items=len(items),
            sales=len(sales),
            next_sku=self.allocator.peek(),
        )

    @asynccontextmanager
    async def _sku_lock(self, sku: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(sku, asyncio.Lock())
        self._lock_users[sku] = self._lock_users.get(sku, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[sku] -= 1
            if not self._lock_users[sku]:
                del self._lock_users[sku]
                del self._locks[sku]

    # Mutations

    async def create_item(self, role: Role | str, fields: ItemFields) -> Item:
        """Create an item, allocating a SKU when none is supplied."""
        require(role, Operation.CREATE_ITEM)
        sku = require_sku(fields.sku) if fields.sku is not None else self.allocator.allocate()
        async with self._sku_lock(sku):
            item = await self.catalog.create(
                sku=sku,
                name=fields.name,
                quantity=fields.quantity,
                cost_price=fields.cost_price,
                sell_price=fields.sell_price,
                category=fields.category,
                location=fields.location,
                min_stock=fields.min_stock,
            )
        self.allocator.observe([item.sku])
        return item

    async def restock(self, role: Role | str, sku: str, add_quantity: int) -> int:
        """Increase quantity on hand; returns the new quantity."""
        require(role, Operation.RESTOCK)
        if add_quantity <= 0:
            raise InvalidFieldError(
                "quantity", "restock quantity must be greater than zero", add_quantity
            )
        async with self._sku_lock(sku):
            current = self.catalog.get(sku)
            updated = await self.catalog.set_quantity(sku, current.quantity + add_quantity)
        logger.info(
            "stock_restocked",
            sku=sku,
            added=add_quantity,
            new_quantity=updated.quantity,
        )
        return updated.quantity

    async def sell(
        self,
        role: Role | str,
        sku: str,
        quantity: int,
        now: datetime | None = None,
    ) -> SaleOutcome:
        """Sell ``quantity`` units and record the sale atomically."""
        require(role, Operation.SELL)
        if quantity <= 0:
            raise InvalidFieldError(
                "quantity", "sale quantity must be greater than zero", quantity
            )
        async with self._sku_lock(sku):
            item = self.catalog.get(sku)
            if quantity > item.quantity:
                raise InsufficientStockError(sku, quantity, item.quantity)

            updated = item.with_quantity(item.quantity - quantity)
            draft = build_sale(
                sku=item.sku,
                name=item.name,
                category=item.category,
                quantity=quantity,
                unit_price=item.sell_price,
                timestamp=now or datetime.now(UTC),
            )
            record = await _run_to_completion(self._commit_sale(updated, draft))

        logger.info(
            "sale_completed",
            sku=sku,
            quantity=quantity,
            remaining=updated.quantity,
            sequence=record.sequence,
            line_total=record.line_total,
        )
        return SaleOutcome(remaining_quantity=updated.quantity, sale=record)

    async def _commit_sale(self, updated: Item, draft: SaleRecord) -> SaleRecord:
        record = await self._gateway.record_sale(updated, draft)
        self.catalog.apply(updated)
        self.ledger.apply(record)
        return record

    async def delete_item(self, role: Role | str, sku: str) -> None:
        """Delete an item; its sales history is kept."""
        require(role, Operation.DELETE_ITEM)
        async with self._sku_lock(sku):
            await self.catalog.remove(sku)

    # Reads and reports

    def get_item(self, sku: str) -> Item:
        return self.catalog.get(sku)

    def list_items(self) -> list[Item]:
        return self.catalog.list_all()

    def search_items(self, query: str) -> list[Item]:
        return self.catalog.search(query)

    def next_sku(self) -> str:
        """Preview the SKU the allocator would hand out next."""
        return self.allocator.peek()

    def low_stock_items(self) -> list[Item]:
        """Items with quantity at or below their minimum, SKU ascending."""
        return [item for item in self.catalog.list_all() if item.is_low_stock]

    def stock_valuation(self, role: Role | str) -> Decimal:
        """Sum of quantity * cost price over the whole catalog."""
        require(role, Operation.VIEW_REPORTS)
        return self._valuation(self.catalog.list_all())

    def stock_summary(self, role: Role | str) -> StockSummary:
        require(role, Operation.VIEW_REPORTS)
        items = self.catalog.list_all()
        return StockSummary(
            total_items=len(items),
            total_value=self._valuation(items),
            low_stock=[item for item in items if item.is_low_stock],
        )

    def category_breakdown(self, role: Role | str) -> list[CategoryTotals]:
        """Units and value at cost per category, ordered by category name."""
        require(role, Operation.VIEW_REPORTS)
        units: dict[str, int] = defaultdict(int)
        values: dict[str, Decimal] = defaultdict(Decimal)
        for item in self.catalog.list_all():
            category = item.category or UNCATEGORIZED
            units[category] += item.quantity
            values[category] += item.stock_value
        return [
            CategoryTotals(category=name, units=units[name], value=values[name])
            for name in sorted(units)
        ]

    def sales_history(self, role: Role | str, sku: str | None = None) -> list[SaleRecord]:
        """Recorded sales, most recent first, optionally for one SKU."""
        require(role, Operation.VIEW_REPORTS)
        if sku is not None:
            return self.ledger.list_for_sku(sku)
        return self.ledger.list_all()

    @staticmethod
    def _valuation(items: list[Item]) -> Decimal:
        return sum((item.stock_value for item in items), Decimal("0"))

    async def close(self) -> None:
        await self._gateway.close()
