"""Core domain entities."""

from stockledger.core.entities.item import Item, ItemFields
from stockledger.core.entities.report import CategoryTotals, StockSummary
from stockledger.core.entities.role import Operation, Role
from stockledger.core.entities.sale import SaleOutcome, SaleRecord

__all__ = [
    "Item",
    "ItemFields",
    "SaleRecord",
    "SaleOutcome",
    "Role",
    "Operation",
    "StockSummary",
    "CategoryTotals",
]
