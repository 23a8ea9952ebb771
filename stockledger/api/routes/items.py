"""Item catalog endpoints: browse, create, restock, sell, delete."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from stockledger.api.dependencies import get_ledger_engine, get_role
from stockledger.application.dto.requests import (
    CreateItemRequest,
    RestockRequest,
    SellRequest,
)
from stockledger.application.dto.responses import (
    ErrorResponse,
    ItemListResponse,
    ItemResponse,
    NextSkuResponse,
    RestockResponse,
    SaleResponse,
    SellResponse,
)
from stockledger.core.entities.role import Role
from stockledger.core.services.engine import InventoryLedgerEngine

router = APIRouter(prefix="/api/items", tags=["items"])


@router.get("", response_model=ItemListResponse)
async def list_items(
    q: str | None = None,
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> ItemListResponse:
    """List items ordered by SKU, optionally filtered by a search term."""
    items = engine.search_items(q) if q else engine.list_items()
    return ItemListResponse(
        items=[ItemResponse.from_item(item) for item in items],
        total=len(items),
    )


@router.get("/low-stock", response_model=ItemListResponse)
async def low_stock(
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> ItemListResponse:
    """Items at or below their minimum stock level."""
    items = engine.low_stock_items()
    return ItemListResponse(
        items=[ItemResponse.from_item(item) for item in items],
        total=len(items),
    )


@router.get("/next-sku", response_model=NextSkuResponse)
async def next_sku(
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> NextSkuResponse:
    return NextSkuResponse(sku=engine.next_sku())


@router.get(
    "/{sku}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    sku: str,
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> ItemResponse:
    return ItemResponse.from_item(engine.get_item(sku))


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_item(
    request: CreateItemRequest,
    role: Role = Depends(get_role),
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> ItemResponse:
    """Create an item. A SKU is allocated when none is given."""
    item = await engine.create_item(role, request.to_fields())
    return ItemResponse.from_item(item)


@router.post(
    "/{sku}/restock",
    response_model=RestockResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def restock_item(
    sku: str,
    request: RestockRequest,
    role: Role = Depends(get_role),
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> RestockResponse:
    quantity = await engine.restock(role, sku, request.quantity)
    return RestockResponse(sku=sku, added=request.quantity, quantity=quantity)


@router.post(
    "/{sku}/sell",
    response_model=SellResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def sell_item(
    sku: str,
    request: SellRequest,
    role: Role = Depends(get_role),
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> SellResponse:
    """Sell units; the stock decrement and the sale record commit together."""
    outcome = await engine.sell(role, sku, request.quantity)
    return SellResponse(
        sku=sku,
        remaining_quantity=outcome.remaining_quantity,
        sale=SaleResponse.from_record(outcome.sale),
    )


@router.delete(
    "/{sku}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_item(
    sku: str,
    role: Role = Depends(get_role),
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> Response:
    """Delete an item. Its sales history is kept."""
    await engine.delete_item(role, sku)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
