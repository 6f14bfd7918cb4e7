"""End-to-end flows through the real app and a migrated SQLite database."""

from httpx import AsyncClient


async def _create_medicine(client: AsyncClient, name: str, stock: int, **fields) -> dict:
    response = await client.post("/api/medicines", json={"name": name, "stock": stock, **fields})
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def _stock(client: AsyncClient, path: str) -> int:
    response = await client.get(path)
    return response.json()["data"]["stock"]


class TestVisitFlow:
    async def test_dispense_and_retract_restores_stock(self, live_client: AsyncClient):
        medicine = await _create_medicine(live_client, "Paracetamol", 10)
        supply = (
            await live_client.post("/api/supplies", json={"name": "Gauze", "stock": 5})
        ).json()["data"]

        response = await live_client.post(
            "/api/visits",
            json={
                "patient_id": "P-001",
                "diagnosis": "Fever",
                "issued_by": "nurse.joy",
                "medicines": [{"item_id": medicine["id"], "quantity": 4}],
                "supplies": [{"name": "Gauze", "quantity": 2}],
            },
        )
        assert response.status_code == 201, response.text
        visit = response.json()["data"]
        assert visit["medicines"][0]["item_name"] == "Paracetamol"

        assert await _stock(live_client, f"/api/medicines/{medicine['id']}") == 6
        assert await _stock(live_client, f"/api/supplies/{supply['id']}") == 3

        response = await live_client.delete(f"/api/visits/{visit['id']}", params={"actor": "admin"})
        assert response.status_code == 200
        assert response.json()["data"]["skipped"] == []

        assert await _stock(live_client, f"/api/medicines/{medicine['id']}") == 10
        assert await _stock(live_client, f"/api/supplies/{supply['id']}") == 5

        log = (
            await live_client.get("/api/transactions", params={"item_id": medicine["id"]})
        ).json()["data"]
        assert [(t["transaction_type"], t["previous_stock"], t["new_stock"]) for t in log] == [
            ("stock_in", 6, 10),
            ("stock_out", 10, 6),
            ("stock_in", 0, 10),
        ]

    async def test_overdraw_rejects_whole_visit(self, live_client: AsyncClient):
        medicine = await _create_medicine(live_client, "Amoxicillin", 10)
        await live_client.post("/api/supplies", json={"name": "Syringe", "stock": 1})

        response = await live_client.post(
            "/api/visits",
            json={
                "patient_id": "P-002",
                "diagnosis": "Infection",
                "issued_by": "nurse.joy",
                "medicines": [{"name": "Amoxicillin", "quantity": 3}],
                "supplies": [{"name": "Syringe", "quantity": 2}],
            },
        )
        assert response.status_code == 400
        assert response.json()["error"] == "INSUFFICIENT_STOCK"

        assert await _stock(live_client, f"/api/medicines/{medicine['id']}") == 10
        assert (await live_client.get("/api/visits")).json()["data"] == []

    async def test_delete_unknown_visit_is_404(self, live_client: AsyncClient):
        await _create_medicine(live_client, "Ibuprofen", 8)
        before = (await live_client.get("/api/transactions")).json()["data"]

        response = await live_client.delete("/api/visits/999")
        assert response.status_code == 404
        assert response.json()["success"] is False

        assert (await live_client.get("/api/transactions")).json()["data"] == before

    async def test_update_item_stock_logs_adjustment(self, live_client: AsyncClient):
        medicine = await _create_medicine(live_client, "Cetirizine", 10)

        response = await live_client.put(
            f"/api/medicines/{medicine['id']}", json={"name": "Cetirizine", "stock": 12}
        )
        assert response.status_code == 200
        assert response.json()["data"]["stock"] == 12

        latest = (
            await live_client.get("/api/transactions", params={"item_id": medicine["id"]})
        ).json()["data"][0]
        assert latest["transaction_type"] == "adjustment"
        assert latest["quantity"] == 2


class TestReferenceDataFlow:
    async def test_category_in_use_cannot_be_deleted(self, live_client: AsyncClient):
        category = (
            await live_client.post(
                "/api/categories", json={"name": "Analgesic", "item_type": "medicine"}
            )
        ).json()["data"]
        await _create_medicine(live_client, "Paracetamol", 5, category_id=category["id"])

        response = await live_client.delete(f"/api/categories/{category['id']}")
        assert response.status_code == 400
        assert response.json()["error"] == "USAGE_CONFLICT"

        response = await live_client.get(f"/api/categories/{category['id']}")
        assert response.status_code == 200

    async def test_unknown_supplier_rejected(self, live_client: AsyncClient):
        response = await live_client.post(
            "/api/medicines", json={"name": "Paracetamol", "stock": 5, "supplier_id": 77}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"
        assert (await live_client.get("/api/medicines")).json()["data"] == []

    async def test_duplicate_name_rejected(self, live_client: AsyncClient):
        await _create_medicine(live_client, "Paracetamol", 5)
        response = await live_client.post("/api/medicines", json={"name": "Paracetamol"})
        assert response.status_code == 400
        assert response.json()["error"] == "DUPLICATE_ITEM"
