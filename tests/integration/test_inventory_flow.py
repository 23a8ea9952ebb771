"""End-to-end flows against a real SQLite database."""

import asyncio
from decimal import Decimal
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from stockledger.api.dependencies import get_ledger_engine
from stockledger.api.main import app
from stockledger.application.services import build_engine
from stockledger.config import Settings
from stockledger.core.entities import ItemFields, Role
from stockledger.core.services import InventoryLedgerEngine


@pytest.fixture
def sqlite_settings(tmp_path: Path) -> Settings:
    return Settings(storage={"backend": "sqlite", "data_dir": tmp_path, "pool_size": 3})


async def _restart(engine: InventoryLedgerEngine, settings: Settings) -> InventoryLedgerEngine:
    await engine.close()
    return await build_engine(settings=settings)


class TestPersistenceAcrossRestart:
    async def test_state_survives_restart(self, sqlite_settings: Settings):
        engine = await build_engine(settings=sqlite_settings)
        created = await engine.create_item(
            Role.MANAGER,
            ItemFields(name="Mouse", quantity=10, cost_price=Decimal("4"), sell_price=Decimal("9")),
        )
        await engine.restock(Role.MANAGER, "UQ001", 5)
        sale = (await engine.sell(Role.STAFF, created.sku, 3)).sale
        await engine.delete_item(Role.ADMIN, "UQ003")

        engine = await _restart(engine, sqlite_settings)
        try:
            assert [item.sku for item in engine.list_items()] == ["UQ001", "UQ002", "UQ004"]
            assert engine.get_item("UQ001").quantity == 125
            assert engine.get_item(created.sku).quantity == 7
            assert engine.sales_history(Role.ADMIN) == [sale]
            # UQ003 was deleted, but UQ004 still holds the highest number
            assert engine.next_sku() == "UQ005"
        finally:
            await engine.close()

    async def test_emptied_database_is_not_reseeded(self, sqlite_settings: Settings):
        engine = await build_engine(settings=sqlite_settings)
        for item in engine.list_items():
            await engine.delete_item(Role.ADMIN, item.sku)

        engine = await _restart(engine, sqlite_settings)
        try:
            assert engine.list_items() == []
        finally:
            await engine.close()


class TestConcurrentSqliteWrites:
    async def test_concurrent_sells_and_restocks(self, sqlite_settings: Settings):
        engine = await build_engine(settings=sqlite_settings)
        try:
            await asyncio.gather(
                *(engine.sell(Role.STAFF, "UQ002", 1) for _ in range(10)),
                *(engine.restock(Role.MANAGER, "UQ002", 2) for _ in range(5)),
                *(engine.sell(Role.STAFF, "UQ001", 2) for _ in range(10)),
            )
            assert engine.get_item("UQ002").quantity == 30
            assert engine.get_item("UQ001").quantity == 100

            engine = await _restart(engine, sqlite_settings)
            assert engine.get_item("UQ002").quantity == 30
            sold = sum(r.quantity for r in engine.sales_history(Role.ADMIN, sku="UQ001"))
            assert sold == 20
        finally:
            await engine.close()


class TestHttpFlow:
    async def test_sell_through_api_persists(self, sqlite_settings: Settings):
        engine = await build_engine(settings=sqlite_settings)
        app.dependency_overrides[get_ledger_engine] = lambda: engine
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                response = await ac.post(
                    "/api/items/UQ002/sell", json={"quantity": 4}, headers={"X-Role": "Staff"}
                )
                assert response.status_code == 200
                sequence = response.json()["sale"]["id"]

                response = await ac.get("/api/reports/valuation", headers={"X-Role": "Admin"})
                assert Decimal(response.json()["total_value"]) == Decimal("410.0")
        finally:
            app.dependency_overrides.pop(get_ledger_engine, None)

        engine = await _restart(engine, sqlite_settings)
        try:
            [record] = engine.sales_history(Role.ADMIN)
            assert record.sequence == sequence
            assert engine.get_item("UQ002").quantity == 26
        finally:
            await engine.close()
