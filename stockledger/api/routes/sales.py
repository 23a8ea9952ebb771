"""Sales history endpoints."""

from fastapi import APIRouter, Depends

from stockledger.api.dependencies import get_ledger_engine, get_role
from stockledger.application.dto.responses import (
    ErrorResponse,
    SaleListResponse,
    SaleResponse,
)
from stockledger.core.entities.role import Role
from stockledger.core.services.engine import InventoryLedgerEngine

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.get(
    "",
    response_model=SaleListResponse,
    responses={403: {"model": ErrorResponse}},
)
async def list_sales(
    sku: str | None = None,
    role: Role = Depends(get_role),
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> SaleListResponse:
    """Recorded sales, most recent first. Filter with ``?sku=``."""
    records = engine.sales_history(role, sku=sku)
    return SaleListResponse(
        sales=[SaleResponse.from_record(record) for record in records],
        total=len(records),
    )
