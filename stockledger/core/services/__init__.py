"""Core domain services."""

from stockledger.core.services.catalog import ItemCatalog
from stockledger.core.services.engine import InventoryLedgerEngine
from stockledger.core.services.role_policy import allowed_operations, permits, require
from stockledger.core.services.sales_ledger import SalesLedger
from stockledger.core.services.sku_allocator import SkuAllocator

__all__ = [
    "ItemCatalog",
    "SalesLedger",
    "InventoryLedgerEngine",
    "SkuAllocator",
    "permits",
    "require",
    "allowed_operations",
]
