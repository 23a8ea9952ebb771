"""Pytest configuration and fixtures."""

import os
from decimal import Decimal

import pytest

# Keep test runs off the on-disk database unless a test asks for one
os.environ.setdefault("STORAGE_BACKEND", "memory")

from stockledger.config import reset_settings  # noqa: E402
from stockledger.core.entities import Item  # noqa: E402
from stockledger.core.services import InventoryLedgerEngine  # noqa: E402
from stockledger.infrastructure.storage import InMemoryPersistenceGateway  # noqa: E402


def _make_item(
    sku: str,
    quantity: int = 10,
    cost: str = "1.0",
    sell: str = "2.0",
    min_stock: int = 0,
    name: str | None = None,
    category: str | None = "General",
) -> Item:
    return Item(
        sku=sku,
        name=name or f"Item {sku}",
        quantity=quantity,
        cost_price=Decimal(cost),
        sell_price=Decimal(sell),
        category=category,
        location="Shelf 1",
        min_stock=min_stock,
    )


@pytest.fixture
def make_item():
    """Factory for items with sensible defaults."""
    return _make_item


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def example_items() -> list[Item]:
    """The three items a fresh database is seeded with."""
    return [
        Item(
            sku="UQ001",
            name="USB Cable",
            quantity=120,
            cost_price=Decimal("1.5"),
            sell_price=Decimal("3.5"),
            category="Electronics",
            location="Shelf 1",
            min_stock=10,
        ),
        Item(
            sku="UQ002",
            name="T-Shirt",
            quantity=30,
            cost_price=Decimal("5.0"),
            sell_price=Decimal("12.0"),
            category="Clothing",
            location="Shelf 2",
            min_stock=5,
        ),
        Item(
            sku="UQ003",
            name="Chips",
            quantity=200,
            cost_price=Decimal("0.5"),
            sell_price=Decimal("1.2"),
            category="Food",
            location="Warehouse A",
            min_stock=20,
        ),
    ]


@pytest.fixture
def memory_gateway(example_items: list[Item]) -> InMemoryPersistenceGateway:
    return InMemoryPersistenceGateway(items=example_items)


@pytest.fixture
async def engine(memory_gateway: InMemoryPersistenceGateway) -> InventoryLedgerEngine:
    """Engine loaded with the example items and an empty ledger."""
    ledger_engine = InventoryLedgerEngine(memory_gateway)
    await ledger_engine.load()
    return ledger_engine
