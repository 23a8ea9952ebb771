"""Append-only ledger of completed sales."""

from datetime import datetime
from decimal import Decimal

from stockledger.config import get_logger
from stockledger.core.entities.sale import SaleRecord
from stockledger.core.exceptions import InvalidFieldError
from stockledger.core.interfaces.persistence import IPersistenceGateway
from stockledger.core.services.catalog import to_decimal

logger = get_logger(__name__)


def build_sale(
    sku: str,
    name: str,
    category: str | None,
    quantity: int,
    unit_price: Decimal | float | str,
    timestamp: datetime,
) -> SaleRecord:
    """Validate fields and build an unsequenced sale record."""
    if quantity <= 0:
        raise InvalidFieldError("quantity", "must be greater than zero", quantity)
    price = to_decimal("unit_price", unit_price)
    if price < 0:
        raise InvalidFieldError("unit_price", "must not be negative", price)
    return SaleRecord(
        sku=sku,
        name=name,
        category=category,
        quantity=quantity,
        unit_price=price,
        timestamp=timestamp,
    )


class SalesLedger:
    """Append-only sequence of SaleRecords, mirrored durably by the gateway."""

    def __init__(self, gateway: IPersistenceGateway):
        self._gateway = gateway
        self._records: list[SaleRecord] = []

    def load(self, records: list[SaleRecord]) -> None:
        self._records = sorted(records, key=lambda r: r.sequence or 0)
        logger.info("ledger_loaded", sales=len(self._records))

    def __len__(self) -> int:
        return len(self._records)

    async def append(
        self,
        sku: str,
        name: str,
        category: str | None,
        quantity: int,
        unit_price: Decimal | float | str,
        timestamp: datetime,
    ) -> SaleRecord:
        """Persist a sale and return the durable, sequenced record."""
        draft = build_sale(sku, name, category, quantity, unit_price, timestamp)
        record = await self._gateway.append_sale(draft)
        self.apply(record)
        return record

    def apply(self, record: SaleRecord) -> None:
        """Add a record that the gateway has already made durable."""
        if record.sequence is None:
            raise ValueError("sale record has no sequence number")
        self._records.append(record)
        # Concurrent appends may complete out of sequence order
        if len(self._records) > 1 and self._records[-2].sequence > record.sequence:  # type: ignore[operator]
            self._records.sort(key=lambda r: r.sequence)  # type: ignore[arg-type, return-value]
        logger.info(
            "sale_recorded",
            sequence=record.sequence,
            sku=record.sku,
            quantity=record.quantity,
        )

    def list_all(self) -> list[SaleRecord]:
        """All sales, most recent first (sequence descending)."""
        return list(reversed(self._records))

    def list_for_sku(self, sku: str) -> list[SaleRecord]:
        return [r for r in reversed(self._records) if r.sku == sku]
