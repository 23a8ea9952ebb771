"""Unit tests for the sales ledger."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from stockledger.core.entities import SaleRecord
from stockledger.core.exceptions import InvalidFieldError, PersistenceError
from stockledger.core.services import SalesLedger
from stockledger.core.services.sales_ledger import build_sale
from stockledger.infrastructure.storage import InMemoryPersistenceGateway

NOW = datetime(2024, 5, 1, 9, 0, 0, tzinfo=UTC)


def _record(sequence: int, sku: str = "A") -> SaleRecord:
    return SaleRecord(
        sequence=sequence,
        sku=sku,
        name=f"Item {sku}",
        quantity=1,
        unit_price=Decimal("1"),
        timestamp=NOW,
    )


class TestBuildSale:
    def test_rejects_non_positive_quantity(self):
        with pytest.raises(InvalidFieldError):
            build_sale("A", "Item", None, 0, "1.0", NOW)

    def test_rejects_negative_price(self):
        with pytest.raises(InvalidFieldError):
            build_sale("A", "Item", None, 1, "-1", NOW)

    def test_builds_unsequenced_record(self):
        record = build_sale("A", "Item", "Cat", 2, "3.5", NOW)
        assert record.sequence is None
        assert record.unit_price == Decimal("3.5")


class TestSalesLedger:
    async def test_append_assigns_increasing_sequence(self):
        ledger = SalesLedger(InMemoryPersistenceGateway())
        first = await ledger.append("A", "Item A", None, 1, "1.0", NOW)
        second = await ledger.append("B", "Item B", None, 2, "2.0", NOW)
        assert first.sequence < second.sequence

    async def test_list_all_most_recent_first(self):
        ledger = SalesLedger(InMemoryPersistenceGateway())
        await ledger.append("A", "Item A", None, 1, "1.0", NOW)
        await ledger.append("B", "Item B", None, 1, "1.0", NOW)
        assert [r.sku for r in ledger.list_all()] == ["B", "A"]

    async def test_failed_append_records_nothing(self):
        ledger = SalesLedger(InMemoryPersistenceGateway(fail_on={"append_sale"}))
        with pytest.raises(PersistenceError):
            await ledger.append("A", "Item A", None, 1, "1.0", NOW)
        assert len(ledger) == 0

    def test_apply_keeps_sequence_order(self):
        ledger = SalesLedger(InMemoryPersistenceGateway())
        ledger.apply(_record(2))
        ledger.apply(_record(1))
        assert [r.sequence for r in ledger.list_all()] == [2, 1]

    def test_apply_requires_sequence(self):
        ledger = SalesLedger(InMemoryPersistenceGateway())
        with pytest.raises(ValueError):
            ledger.apply(_record(1).model_copy(update={"sequence": None}))

    def test_load_sorts_and_filters_by_sku(self):
        ledger = SalesLedger(InMemoryPersistenceGateway())
        ledger.load([_record(3, "B"), _record(1, "A"), _record(2, "A")])
        assert [r.sequence for r in ledger.list_for_sku("A")] == [2, 1]
        assert [r.sequence for r in ledger.list_all()] == [3, 2, 1]
