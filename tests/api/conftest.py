"""Fixtures for API tests."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from stockledger.api.dependencies import get_ledger_engine
from stockledger.api.main import app
from stockledger.core.services import InventoryLedgerEngine


@pytest.fixture
async def client(engine: InventoryLedgerEngine) -> AsyncGenerator[AsyncClient, None]:
    """Client whose requests are served by the example-item engine."""
    app.dependency_overrides[get_ledger_engine] = lambda: engine
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_ledger_engine, None)


@pytest.fixture
def admin() -> dict[str, str]:
    return {"X-Role": "Admin"}


@pytest.fixture
def manager() -> dict[str, str]:
    return {"X-Role": "Manager"}


@pytest.fixture
def staff() -> dict[str, str]:
    return {"X-Role": "Staff"}
