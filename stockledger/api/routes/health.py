"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from stockledger.api.dependencies import get_ledger_engine
from stockledger.application.dto.responses import HealthResponse
from stockledger.config import get_settings
from stockledger.core.services.engine import InventoryLedgerEngine

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(
    engine: InventoryLedgerEngine = Depends(get_ledger_engine),
) -> HealthResponse:
    """
    Service health check.

    Returns status, uptime, the storage backend and loaded record counts.
    """
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        backend=settings.storage.backend,
        items=len(engine.catalog),
        sales=len(engine.ledger),
    )
