"""API route modules."""

from stockledger.api.routes.health import router as health_router
from stockledger.api.routes.items import router as items_router
from stockledger.api.routes.reports import router as reports_router
from stockledger.api.routes.sales import router as sales_router

__all__ = [
    "health_router",
    "items_router",
    "reports_router",
    "sales_router",
]
