"""Report value objects derived from catalog state."""

from dataclasses import dataclass, field
from decimal import Decimal

from stockledger.core.entities.item import Item


@dataclass(frozen=True)
class StockSummary:
    """Stock summary: item count, valuation at cost, and low-stock items."""

    total_items: int
    total_value: Decimal
    low_stock: list[Item] = field(default_factory=list)


@dataclass(frozen=True)
class CategoryTotals:
    """Units on hand and value at cost for one category."""

    category: str
    units: int
    value: Decimal
