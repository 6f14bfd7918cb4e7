"""Tests for health endpoints."""

from httpx import ASGITransport, AsyncClient

from clinic_inventory.api.main import app


class TestHealthEndpoints:
    async def test_root_health(self):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_api_health(self):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/health")
        body = response.json()
        assert body["status"] == "healthy"
        assert body["uptime_seconds"] >= 0

    async def test_db_health(self, live_client: AsyncClient):
        response = await live_client.get("/api/health/db")
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "sqlite"
