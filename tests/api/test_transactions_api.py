"""Transaction endpoint tests."""

import pytest


@pytest.fixture
async def stocked_item(auth_client, make_item):
    item = await make_item(quantity=10, reorder_point=2, unit_price=1.5)
    await auth_client.post(f"/api/inventory/{item.id}/stock-in", json={"quantity": 5})
    await auth_client.post(f"/api/inventory/{item.id}/stock-out", json={"quantity": 3})
    return item


async def test_requires_auth(client):
    assert (await client.get("/api/transactions")).status_code == 401


async def test_record_stock_out_updates_item(auth_client, make_item):
    item = await make_item(quantity=4, reorder_point=1)

    response = await auth_client.post(
        "/api/transactions",
        json={"item_id": item.id, "type": "stock-out", "quantity": 4, "notes": "scrap"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["item"]["quantity"] == 0
    assert body["item"]["status"] == "out_of_stock"
    assert body["transaction"]["notes"] == "scrap"
    assert body["alert"]["type"] == "out_of_stock"


async def test_record_rejects_unknown_type(auth_client, make_item):
    item = await make_item()
    response = await auth_client.post(
        "/api/transactions", json={"item_id": item.id, "type": "adjust", "quantity": 1}
    )
    assert response.status_code == 422


async def test_record_rejects_bad_quantity(auth_client, make_item):
    item = await make_item()
    response = await auth_client.post(
        "/api/transactions", json={"item_id": item.id, "type": "stock-in", "quantity": 0}
    )
    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_QUANTITY"


async def test_list_filters(auth_client, stocked_item):
    everything = (await auth_client.get("/api/transactions")).json()
    outs = (await auth_client.get("/api/transactions", params={"type": "stock-out"})).json()

    assert everything["total"] == 2
    assert [t["type"] for t in everything["transactions"]] == ["stock-out", "stock-in"]
    assert outs["total"] == 1
    assert outs["transactions"][0]["total_value"] == 4.5


async def test_list_by_date(auth_client, stocked_item):
    future = (await auth_client.get("/api/transactions", params={"start_date": "2999-01-01"})).json()
    past = (await auth_client.get("/api/transactions", params={"end_date": "2000-01-01"})).json()

    assert future["total"] == 0
    assert past["total"] == 0
    assert future["total_pages"] == 0


async def test_bad_date_is_validation_error(auth_client, db):
    response = await auth_client.get("/api/transactions", params={"start_date": "soon"})
    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


async def test_item_history_and_lookup(auth_client, stocked_item):
    history = (await auth_client.get(f"/api/transactions/item/{stocked_item.id}")).json()
    assert len(history) == 2

    fetched = await auth_client.get(f"/api/transactions/{history[0]['id']}")
    assert fetched.json() == history[0]


async def test_missing_lookups(auth_client, db):
    assert (await auth_client.get("/api/transactions/item/404")).status_code == 404
    response = await auth_client.get("/api/transactions/404")
    assert response.json()["error_code"] == "TRANSACTION_NOT_FOUND"
