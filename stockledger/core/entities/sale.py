"""Sale ledger domain entities."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator


class SaleRecord(BaseModel):
    """A completed sale.

    Name, category and price are snapshots taken at sale time, so the record
    stays meaningful after its item is deleted. ``sequence`` is None until the
    persistence gateway assigns it on append.
    """

    model_config = ConfigDict(frozen=True)

    sequence: int | None = None
    sku: str
    name: str
    category: str | None = None
    quantity: int
    unit_price: Decimal
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def truncate_to_seconds(cls, v: datetime) -> datetime:
        return v.replace(microsecond=0)

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class SaleOutcome:
    """Result of a successful sell."""

    remaining_quantity: int
    sale: SaleRecord
