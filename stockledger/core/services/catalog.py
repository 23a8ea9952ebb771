"""
Item catalog.

In-memory mapping from SKU to Item with write-through persistence:
every mutation is made durable through the gateway before the in-memory
map changes, so a persistence failure leaves the catalog untouched.
"""

from decimal import Decimal, InvalidOperation

from stockledger.config import get_logger
from stockledger.core.entities.item import Item
from stockledger.core.exceptions import (
    DuplicateSkuError,
    InvalidFieldError,
    ItemNotFoundError,
)
from stockledger.core.interfaces.persistence import IPersistenceGateway

logger = get_logger(__name__)

MAX_COUNT = 2**63 - 1

# Path segments under /api/items that are not item lookups
RESERVED_SKUS = frozenset({"low-stock", "next-sku"})


def to_decimal(field: str, value: Decimal | float | int | str) -> Decimal:
    """Coerce a money value to a finite Decimal."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidFieldError(field, "must be a decimal number", value) from None
    if not amount.is_finite():
        raise InvalidFieldError(field, "must be a finite number", value)
    return amount


def require_non_negative(field: str, value: int | Decimal) -> None:
    if value < 0:
        raise InvalidFieldError(field, "must not be negative", value)


def require_count(field: str, value: int) -> None:
    """Quantities are stored as 64-bit integers."""
    require_non_negative(field, value)
    if value > MAX_COUNT:
        raise InvalidFieldError(field, f"must not exceed {MAX_COUNT}", value)


def require_sku(value: str | None) -> str:
    """Check a caller-chosen SKU. SKUs are stored exactly as given."""
    if value is None or not value.strip():
        raise InvalidFieldError("sku", "must not be empty", value)
    if value != value.strip():
        raise InvalidFieldError("sku", "must not start or end with whitespace", value)
    if "/" in value:
        raise InvalidFieldError("sku", "must not contain '/'", value)
    if value in RESERVED_SKUS:
        raise InvalidFieldError("sku", "is reserved", value)
    return value


def require_text(field: str, value: str | None) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidFieldError(field, "must not be empty", value)
    return text


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


class ItemCatalog:
    """SKU -> Item map with invariant checks and write-through persistence."""

    def __init__(self, gateway: IPersistenceGateway):
        self._gateway = gateway
        self._items: dict[str, Item] = {}

    def load(self, items: list[Item]) -> None:
        """Replace the in-memory map with persisted state."""
        self._items = {item.sku: item for item in items}
        logger.info("catalog_loaded", items=len(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, sku: object) -> bool:
        return sku in self._items

    async def create(
        self,
        sku: str,
        name: str,
        quantity: int,
        cost_price: Decimal | float | str,
        sell_price: Decimal | float | str,
        category: str | None = None,
        location: str | None = None,
        min_stock: int = 0,
    ) -> Item:
        """Create and persist a new item.

        The gateway inserts rather than upserts, so a SKU that already exists
        in the store fails with DuplicateSkuError even if memory missed it.
        """
        sku = require_sku(sku)
        name = require_text("name", name)
        cost = to_decimal("cost_price", cost_price)
        sell = to_decimal("sell_price", sell_price)
        require_count("quantity", quantity)
        require_non_negative("cost_price", cost)
        require_non_negative("sell_price", sell)
        require_count("min_stock", min_stock)

        if sku in self._items:
            raise DuplicateSkuError(sku)

        item = Item(
            sku=sku,
            name=name,
            quantity=quantity,
            cost_price=cost,
            sell_price=sell,
            category=_optional_text(category),
            location=_optional_text(location),
            min_stock=min_stock,
        )
        await self._gateway.insert_item(item)
        self._items[sku] = item
        logger.info("item_created", sku=sku, name=name, quantity=quantity)
        return item

    def get(self, sku: str) -> Item:
        """Get item by SKU."""
        item = self._items.get(sku)
        if item is None:
            raise ItemNotFoundError(sku)
        return item

    def list_all(self) -> list[Item]:
        """All items ordered by SKU ascending."""
        return [self._items[sku] for sku in sorted(self._items)]

    def search(self, query: str) -> list[Item]:
        """Case-insensitive substring match over SKU, name and category."""
        needle = query.strip().casefold()
        if not needle:
            return self.list_all()
        return [
            item
            for item in self.list_all()
            if needle in item.sku.casefold()
            or needle in item.name.casefold()
            or needle in (item.category or "").casefold()
        ]

    async def set_quantity(self, sku: str, new_quantity: int) -> Item:
        """Persist a new quantity on hand."""
        item = self.get(sku)
        require_count("quantity", new_quantity)
        updated = item.with_quantity(new_quantity)
        await self._gateway.upsert_item(updated)
        self._items[sku] = updated
        return updated

    def apply(self, item: Item) -> None:
        """Swap in a new version of an item already made durable elsewhere."""
        if item.sku not in self._items:
            raise ItemNotFoundError(item.sku)
        self._items[item.sku] = item

    async def remove(self, sku: str) -> None:
        """Delete an item. Historical sale records keep their own snapshots."""
        self.get(sku)
        await self._gateway.delete_item(sku)
        del self._items[sku]
        logger.info("item_deleted", sku=sku)
