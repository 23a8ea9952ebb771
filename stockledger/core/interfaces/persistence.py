"""Abstract interface for the durable mirror of catalog and ledger state."""

from abc import ABC, abstractmethod

from stockledger.core.entities.item import Item
from stockledger.core.entities.sale import SaleRecord


class IPersistenceGateway(ABC):
    """Interface for item and sale persistence.

    Every method either completes durably or raises PersistenceError.
    """

    @abstractmethod
    async def load_all_items(self) -> list[Item]:
        """Load every persisted item, ordered by SKU."""
        pass

    @abstractmethod
    async def load_all_sales(self) -> list[SaleRecord]:
        """Load every persisted sale, ordered by sequence ascending."""
        pass

    @abstractmethod
    async def insert_item(self, item: Item) -> None:
        """Insert a new item; raises DuplicateSkuError if the SKU is stored."""
        pass

    @abstractmethod
    async def upsert_item(self, item: Item) -> None:
        """Insert or replace an item."""
        pass

    @abstractmethod
    async def delete_item(self, sku: str) -> None:
        """Delete an item. Sale records are untouched."""
        pass

    @abstractmethod
    async def append_sale(self, sale: SaleRecord) -> SaleRecord:
        """Append a sale and return it with its assigned sequence number."""
        pass

    @abstractmethod
    async def record_sale(self, item: Item, sale: SaleRecord) -> SaleRecord:
        """Write the decremented item and append the sale in one transaction.

        Either both writes are durable or neither is.
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        return None
