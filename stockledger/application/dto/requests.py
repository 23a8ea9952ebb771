"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation. Sign checks are left to
the engine so that they surface as INVALID_FIELD errors.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from stockledger.core.entities.item import ItemFields


class CreateItemRequest(BaseModel):
    """Request to add an item to the catalog."""

    sku: str | None = Field(
        default=None,
        description="SKU to use; allocated automatically when omitted",
        examples=["UQ004"],
    )
    name: str = Field(..., description="Display name", examples=["HDMI Cable"])
    quantity: int = Field(default=0, description="Initial quantity on hand")
    cost_price: Decimal = Field(default=Decimal("0"), description="Unit cost")
    sell_price: Decimal = Field(default=Decimal("0"), description="Unit selling price")
    category: str | None = Field(default=None, examples=["Electronics"])
    location: str | None = Field(default=None, examples=["Shelf 1"])
    min_stock: int = Field(default=0, description="Low-stock threshold")

    def to_fields(self) -> ItemFields:
        return ItemFields(**self.model_dump())


class RestockRequest(BaseModel):
    """Request to add units to an item."""

    quantity: int = Field(..., description="Units to add", examples=[10])


class SellRequest(BaseModel):
    """Request to sell units of an item."""

    quantity: int = Field(..., description="Units to sell", examples=[1])
