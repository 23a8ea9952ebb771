"""Data transfer objects for the HTTP API."""

from stockledger.application.dto.requests import (
    CreateItemRequest,
    RestockRequest,
    SellRequest,
)
from stockledger.application.dto.responses import (
    CategoryTotalsResponse,
    ErrorResponse,
    HealthResponse,
    ItemListResponse,
    ItemResponse,
    NextSkuResponse,
    RestockResponse,
    SaleListResponse,
    SaleResponse,
    SellResponse,
    StockSummaryResponse,
    ValuationResponse,
)

__all__ = [
    "CreateItemRequest",
    "RestockRequest",
    "SellRequest",
    "ItemResponse",
    "ItemListResponse",
    "NextSkuResponse",
    "SaleResponse",
    "SaleListResponse",
    "SellResponse",
    "RestockResponse",
    "ValuationResponse",
    "StockSummaryResponse",
    "CategoryTotalsResponse",
    "HealthResponse",
    "ErrorResponse",
]
