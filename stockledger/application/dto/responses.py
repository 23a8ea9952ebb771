"""Response DTOs for API endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from stockledger.core.entities.item import Item
from stockledger.core.entities.report import CategoryTotals
from stockledger.core.entities.sale import SaleRecord


class ItemResponse(BaseModel):
    """Catalog item with derived stock fields."""

    sku: str
    name: str
    quantity: int
    cost_price: Decimal
    sell_price: Decimal
    category: str | None = None
    location: str | None = None
    min_stock: int
    low_stock: bool
    stock_value: Decimal

    @classmethod
    def from_item(cls, item: Item) -> "ItemResponse":
        return cls(
            sku=item.sku,
            name=item.name,
            quantity=item.quantity,
            cost_price=item.cost_price,
            sell_price=item.sell_price,
            category=item.category,
            location=item.location,
            min_stock=item.min_stock,
            low_stock=item.is_low_stock,
            stock_value=item.stock_value,
        )


class ItemListResponse(BaseModel):
    items: list[ItemResponse]
    total: int


class NextSkuResponse(BaseModel):
    sku: str


class SaleResponse(BaseModel):
    """A recorded sale."""

    id: int
    sku: str
    name: str
    category: str | None = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    timestamp: datetime

    @classmethod
    def from_record(cls, record: SaleRecord) -> "SaleResponse":
        return cls(
            id=record.sequence or 0,
            sku=record.sku,
            name=record.name,
            category=record.category,
            quantity=record.quantity,
            unit_price=record.unit_price,
            line_total=record.line_total,
            timestamp=record.timestamp,
        )


class SaleListResponse(BaseModel):
    sales: list[SaleResponse]
    total: int


class SellResponse(BaseModel):
    """Result of a sale."""

    sku: str
    remaining_quantity: int
    sale: SaleResponse


class RestockResponse(BaseModel):
    """Result of a restock."""

    sku: str
    added: int
    quantity: int


class ValuationResponse(BaseModel):
    total_value: Decimal


class StockSummaryResponse(BaseModel):
    """Item count, value at cost and low-stock items."""

    total_items: int
    total_value: Decimal
    low_stock: list[ItemResponse]


class CategoryTotalsResponse(BaseModel):
    category: str
    units: int
    value: Decimal

    @classmethod
    def from_totals(cls, totals: CategoryTotals) -> "CategoryTotalsResponse":
        return cls(category=totals.category, units=totals.units, value=totals.value)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    backend: str | None = None
    items: int | None = None
    sales: int | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. ITEM_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
