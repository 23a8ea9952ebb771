"""
Dependency injection for FastAPI.

Provides the engine and the caller's role to route handlers.
"""

from fastapi import Header

from stockledger.application.services import get_engine
from stockledger.core.entities.role import Role
from stockledger.core.services.engine import InventoryLedgerEngine


async def get_ledger_engine() -> InventoryLedgerEngine:
    """Get the process-wide inventory ledger engine."""
    return await get_engine()


def get_role(
    x_role: Role = Header(..., description="Role asserted by the authentication layer"),
) -> Role:
    """Read the caller's role from the X-Role header."""
    return x_role
