"""Item domain entity."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class Item(BaseModel):
    """A stock-keeping unit and its quantity on hand.

    Items are immutable values; a quantity change produces a new Item via
    ``with_quantity`` so the previous version stays intact until the new one
    has been persisted.
    """

    model_config = ConfigDict(frozen=True)

    sku: str
    name: str
    quantity: int = 0
    cost_price: Decimal = Decimal("0")
    sell_price: Decimal = Decimal("0")
    category: str | None = None
    location: str | None = None
    min_stock: int = 0

    @property
    def is_low_stock(self) -> bool:
        """Low stock means quantity at or below the minimum threshold."""
        return self.quantity <= self.min_stock

    @property
    def stock_value(self) -> Decimal:
        """Inventory value at cost = quantity * cost_price."""
        return self.quantity * self.cost_price

    def with_quantity(self, quantity: int) -> "Item":
        return self.model_copy(update={"quantity": quantity})


class ItemFields(BaseModel):
    """Caller-supplied fields for a new item.

    Sign and emptiness checks happen in the catalog so that they surface as
    InvalidFieldError. When ``sku`` is None the engine allocates one.
    """

    sku: str | None = None
    name: str
    quantity: int = 0
    cost_price: Decimal = Decimal("0")
    sell_price: Decimal = Decimal("0")
    category: str | None = None
    location: str | None = None
    min_stock: int = 0
