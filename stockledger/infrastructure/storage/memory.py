"""
In-memory persistence gateway.

Keeps copies of items and sales in dictionaries. Nothing survives the
process; used for tests and the ``memory`` storage backend.
"""

from stockledger.config import get_logger
from stockledger.core.entities.item import Item
from stockledger.core.entities.sale import SaleRecord
from stockledger.core.exceptions import DuplicateSkuError, PersistenceError
from stockledger.core.interfaces.persistence import IPersistenceGateway

logger = get_logger(__name__)


class InMemoryPersistenceGateway(IPersistenceGateway):
    """Volatile gateway with the same contract as the SQLite one.

    Operations named in ``fail_on`` raise PersistenceError without writing
    anything, which lets callers exercise their failure paths.
    """

    def __init__(
        self,
        items: list[Item] | None = None,
        sales: list[SaleRecord] | None = None,
        fail_on: set[str] | None = None,
    ):
        self._items: dict[str, Item] = {item.sku: item for item in items or []}
        self._sales: list[SaleRecord] = []
        self._last_sequence = 0
        self.fail_on: set[str] = set(fail_on or ())
        for sale in sales or []:
            self._store_sale(sale)

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            logger.warning("persistence_failure_injected", operation=operation)
            raise PersistenceError(operation, "injected failure")

    def _store_sale(self, sale: SaleRecord) -> SaleRecord:
        # Sequence numbers never rewind, even for explicitly numbered records
        if sale.sequence is None or sale.sequence <= self._last_sequence:
            sale = sale.model_copy(update={"sequence": self._last_sequence + 1})
        self._last_sequence = sale.sequence  # type: ignore[assignment]
        self._sales.append(sale)
        return sale

    async def load_all_items(self) -> list[Item]:
        self._check("load_all_items")
        return [self._items[sku] for sku in sorted(self._items)]

    async def load_all_sales(self) -> list[SaleRecord]:
        self._check("load_all_sales")
        return list(self._sales)

    async def insert_item(self, item: Item) -> None:
        self._check("insert_item")
        if item.sku in self._items:
            raise DuplicateSkuError(item.sku)
        self._items[item.sku] = item

    async def upsert_item(self, item: Item) -> None:
        self._check("upsert_item")
        self._items[item.sku] = item

    async def delete_item(self, sku: str) -> None:
        self._check("delete_item")
        self._items.pop(sku, None)

    async def append_sale(self, sale: SaleRecord) -> SaleRecord:
        self._check("append_sale")
        return self._store_sale(sale)

    async def record_sale(self, item: Item, sale: SaleRecord) -> SaleRecord:
        self._check("record_sale")
        if item.sku not in self._items:
            raise PersistenceError("record_sale", f"inventory row missing for {item.sku}")
        self._items[item.sku] = item
        return self._store_sale(sale)
