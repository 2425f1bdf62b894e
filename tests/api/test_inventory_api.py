"""Inventory endpoint tests."""

import csv
import io

import pytest


async def create(client, **fields):
    payload = {"name": "Hex bolt", "category": "fasteners", "quantity": 5, "reorder_point": 2,
               "unit_price": 0.5}
    payload.update(fields)
    response = await client.post("/api/inventory", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestAuth:
    async def test_missing_token(self, client):
        response = await client.get("/api/inventory")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        body = response.json()
        assert body["error_code"] == "AUTH_ERROR"
        assert body["path"] == "/api/inventory"

    async def test_garbage_token(self, client):
        response = await client.get(
            "/api/inventory", headers={"Authorization": "Bearer not.a.token"}
        )
        assert response.status_code == 401

    async def test_request_id_is_echoed(self, auth_client):
        response = await auth_client.get("/api/inventory", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
        assert "X-Response-Time" in response.headers


class TestItems:
    async def test_create_derives_status(self, auth_client, user):
        item = await create(auth_client, quantity=2, status="in_stock")

        assert item["status"] == "low_stock"
        assert item["total_value"] == 1.0
        assert item["created_by"] == user.id

    async def test_create_rejects_negative_quantity(self, auth_client):
        response = await auth_client.post(
            "/api/inventory", json={"name": "x", "category": "y", "quantity": -1}
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_get_missing(self, auth_client):
        response = await auth_client.get("/api/inventory/999")
        assert response.status_code == 404
        assert response.json()["error_code"] == "ITEM_NOT_FOUND"

    async def test_list_paginates(self, auth_client):
        for name in ("a", "b", "c"):
            await create(auth_client, name=name)

        body = (await auth_client.get("/api/inventory", params={"limit": 2, "page": 2})).json()

        assert [i["name"] for i in body["items"]] == ["c"]
        assert body["total"] == 3
        assert body["total_pages"] == 2

    async def test_status_views(self, auth_client):
        await create(auth_client, name="empty", quantity=0)
        await create(auth_client, name="low", quantity=1)
        await create(auth_client, name="plenty", quantity=50)

        out = (await auth_client.get("/api/inventory/status/out-of-stock")).json()
        low = (await auth_client.get("/api/inventory/status/low-stock")).json()

        assert [i["name"] for i in out] == ["empty"]
        assert [i["name"] for i in low] == ["low"]

    async def test_update_metadata(self, auth_client):
        item = await create(auth_client)

        response = await auth_client.patch(
            f"/api/inventory/{item['id']}", json={"reorder_point": 10, "location": "B2"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "low_stock"
        assert response.json()["location"] == "B2"

    async def test_lowering_reorder_point_resolves_alert(self, auth_client):
        item = await create(auth_client, quantity=5, reorder_point=2)
        await auth_client.post(f"/api/inventory/{item['id']}/stock-out", json={"quantity": 4})

        response = await auth_client.patch(
            f"/api/inventory/{item['id']}", json={"reorder_point": 0}
        )

        assert response.json()["status"] == "in_stock"
        assert response.json()["quantity"] == 1
        assert (await auth_client.get("/api/alerts/active")).json() == []

    @pytest.mark.parametrize("field", ["quantity", "status"])
    async def test_update_refuses_stock_fields(self, auth_client, field):
        item = await create(auth_client)
        response = await auth_client.put(f"/api/inventory/{item['id']}", json={field: 1})
        assert response.status_code == 400

    async def test_delete(self, auth_client):
        item = await create(auth_client)

        assert (await auth_client.delete(f"/api/inventory/{item['id']}")).status_code == 200
        assert (await auth_client.get(f"/api/inventory/{item['id']}")).status_code == 404

    async def test_delete_with_history_is_refused(self, auth_client):
        item = await create(auth_client)
        await auth_client.post(f"/api/inventory/{item['id']}/stock-in", json={"quantity": 1})

        response = await auth_client.delete(f"/api/inventory/{item['id']}")

        assert response.status_code == 409
        assert response.json()["error_code"] == "HAS_TRANSACTIONS"


class TestStockChanges:
    async def test_stock_out_to_low_raises_alert(self, auth_client):
        item = await create(auth_client, quantity=5, reorder_point=2)

        response = await auth_client.post(
            f"/api/inventory/{item['id']}/stock-out", json={"quantity": 4, "notes": "job 7"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["item"]["quantity"] == 1
        assert body["item"]["status"] == "low_stock"
        assert body["transaction"]["type"] == "stock-out"
        assert body["transaction"]["total_value"] == 2.0
        assert body["alert"]["type"] == "low_stock"
        assert body["alert"]["status"] == "active"

    async def test_stock_in_resolves_alert(self, auth_client):
        item = await create(auth_client, quantity=1, reorder_point=2)
        await auth_client.post(f"/api/inventory/{item['id']}/stock-out", json={"quantity": 1})

        body = (
            await auth_client.post(f"/api/inventory/{item['id']}/stock-in", json={"quantity": 10})
        ).json()

        assert body["item"]["quantity"] == 10
        assert body["item"]["last_restocked"] is not None
        assert body["alert"]["status"] == "resolved"

    async def test_insufficient_stock(self, auth_client):
        item = await create(auth_client, quantity=3)

        response = await auth_client.post(
            f"/api/inventory/{item['id']}/stock-out", json={"quantity": 4}
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "INSUFFICIENT_STOCK"
        assert (await auth_client.get(f"/api/inventory/{item['id']}")).json()["quantity"] == 3

    @pytest.mark.parametrize("quantity", [0, -2, 1.5, "3", True])
    async def test_invalid_quantity(self, auth_client, quantity):
        item = await create(auth_client)

        response = await auth_client.post(
            f"/api/inventory/{item['id']}/stock-in", json={"quantity": quantity}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_QUANTITY"

    async def test_unknown_item(self, auth_client):
        response = await auth_client.post("/api/inventory/999/stock-in", json={"quantity": 1})
        assert response.status_code == 404

    async def test_item_history(self, auth_client):
        item = await create(auth_client)
        await auth_client.post(f"/api/inventory/{item['id']}/stock-in", json={"quantity": 1})
        await auth_client.post(f"/api/inventory/{item['id']}/stock-out", json={"quantity": 2})

        history = (await auth_client.get(f"/api/inventory/{item['id']}/transactions")).json()

        assert [t["type"] for t in history] == ["stock-out", "stock-in"]


class TestExport:
    async def test_csv(self, auth_client):
        await create(auth_client, name="Bolt, hex")

        response = await auth_client.get("/api/inventory/export/report")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        rows = list(csv.reader(io.StringIO(response.text)))
        assert rows[0][:3] == ["id", "name", "category"]
        assert rows[1][1] == "Bolt, hex"

    async def test_csv_header_when_empty(self, auth_client):
        response = await auth_client.get("/api/inventory/export/report")
        assert response.text.strip().split(",")[0] == "id"

    async def test_json(self, auth_client):
        await create(auth_client)
        response = await auth_client.get("/api/inventory/export/report", params={"format": "json"})
        assert response.json()[0]["name"] == "Hex bolt"
