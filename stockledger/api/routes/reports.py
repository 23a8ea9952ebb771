"""Stock report endpoints."""

from fastapi import APIRouter, Depends

from stockledger.api.dependencies import get_ledger_engine, get_role
from stockledger.application.dto.responses import (
    CategoryTotalsResponse,
    ErrorResponse,
    ItemResponse,
    StockSummaryResponse,
    ValuationResponse,
)
from stockledger.core.entities.role import Role
from stockledger.core.services.engine import InventoryLedgerEngine

router = APIRouter(
    prefix="/api/reports",
    tags=["reports"],
    responses={403: {"model": ErrorResponse}},
)


@router.get("/valuation", response_model=ValuationResponse)
async def stock_valuation(
    role: Role = Depends(get_role),
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> ValuationResponse:
    """Total stock value at cost."""
    return ValuationResponse(total_value=engine.stock_valuation(role))


@router.get("/summary", response_model=StockSummaryResponse)
async def stock_summary(
    role: Role = Depends(get_role),
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> StockSummaryResponse:
    summary = engine.stock_summary(role)
    return StockSummaryResponse(
        total_items=summary.total_items,
        total_value=summary.total_value,
        low_stock=[ItemResponse.from_item(item) for item in summary.low_stock],
    )


@router.get("/categories", response_model=list[CategoryTotalsResponse])
async def category_breakdown(
    role: Role = Depends(get_role),
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> list[CategoryTotalsResponse]:
    """Units and value at cost per category."""
    return [
        CategoryTotalsResponse.from_totals(totals)
        for totals in engine.category_breakdown(role)
    ]
