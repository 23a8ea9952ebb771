"""API tests for report and sales endpoints."""

from unittest.mock import MagicMock

from httpx import ASGITransport, AsyncClient

from stockledger.api.dependencies import get_ledger_engine
from stockledger.api.main import app


class TestReports:
    async def test_valuation(self, client: AsyncClient, manager):
        response = await client.get("/api/reports/valuation", headers=manager)
        assert response.status_code == 200
        assert float(response.json()["total_value"]) == 430.0

    async def test_staff_cannot_view(self, client: AsyncClient, staff):
        response = await client.get("/api/reports/valuation", headers=staff)
        assert response.status_code == 403

    async def test_summary(self, client: AsyncClient, admin):
        response = await client.get("/api/reports/summary", headers=admin)
        data = response.json()
        assert data["total_items"] == 3
        assert data["low_stock"] == []

    async def test_categories(self, client: AsyncClient, admin):
        response = await client.get("/api/reports/categories", headers=admin)
        assert [row["category"] for row in response.json()] == [
            "Clothing",
            "Electronics",
            "Food",
        ]


class TestSalesHistory:
    async def test_history_most_recent_first(self, client: AsyncClient, staff, manager):
        await client.post("/api/items/UQ001/sell", json={"quantity": 1}, headers=staff)
        await client.post("/api/items/UQ003/sell", json={"quantity": 4}, headers=staff)

        response = await client.get("/api/sales", headers=manager)
        data = response.json()
        assert data["total"] == 2
        assert [sale["sku"] for sale in data["sales"]] == ["UQ003", "UQ001"]

    async def test_filter_by_sku(self, client: AsyncClient, staff, manager):
        await client.post("/api/items/UQ001/sell", json={"quantity": 1}, headers=staff)
        await client.post("/api/items/UQ003/sell", json={"quantity": 4}, headers=staff)

        response = await client.get("/api/sales", params={"sku": "UQ001"}, headers=manager)
        assert [sale["sku"] for sale in response.json()["sales"]] == ["UQ001"]

    async def test_history_survives_deletion(self, client: AsyncClient, staff, admin):
        await client.post("/api/items/UQ002/sell", json={"quantity": 2}, headers=staff)
        await client.delete("/api/items/UQ002", headers=admin)

        response = await client.get("/api/sales", headers=admin)
        assert [sale["name"] for sale in response.json()["sales"]] == ["T-Shirt"]


class TestUnexpectedErrors:
    async def test_unhandled_exception_becomes_500(self):
        broken = MagicMock()
        broken.stock_valuation.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_ledger_engine] = lambda: broken
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                response = await ac.get("/api/reports/valuation", headers={"X-Role": "Admin"})
        finally:
            app.dependency_overrides.pop(get_ledger_engine, None)

        assert response.status_code == 500
        assert response.json()["error_code"] == "RuntimeError"
