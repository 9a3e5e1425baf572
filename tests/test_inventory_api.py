"""
Public menu and admin inventory routes.
"""
import pytest

from ordering.core.clock import Clock
from ordering.db.seed import MENU_CATALOG


@pytest.mark.asyncio
async def test_menu_is_public_and_caps_displayed_counts(client, make_item):
    await make_item("Veg Roll", available_count=15)
    await make_item("Alfredo Pasta", available_count=0, category="Pasta")

    resp = await client.get("/menu")

    assert resp.status_code == 200
    counts = {item["name"]: item["available_count"] for item in resp.json()}
    assert counts == {"Alfredo Pasta": 0, "Veg Roll": 12}


@pytest.mark.asyncio
async def test_admin_inventory_shows_raw_counts(client, admin_headers, make_item):
    await make_item("Veg Roll", available_count=15)

    resp = await client.get("/admin/inventory", headers=admin_headers)

    assert resp.json()[0]["available_count"] == 15


@pytest.mark.asyncio
async def test_create_item_defaults_to_daily_cap(client, admin_headers):
    resp = await client.post(
        "/admin/inventory",
        json={"name": "Paneer Tikka Roll", "category": "Rolls", "price": "₹130"},
        headers=admin_headers,
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["available_count"] == 12
    assert body["price"] == ["₹130"]


@pytest.mark.asyncio
async def test_set_stock(client, admin_headers, make_item, stock_of):
    item_id = await make_item("Broasted Chicken", available_count=12, category="Chicken")

    resp = await client.patch(f"/admin/inventory/{item_id}/stock", json={"available_count": 0}, headers=admin_headers)
    assert resp.status_code == 200
    assert await stock_of(item_id) == 0

    negative = await client.patch(f"/admin/inventory/{item_id}/stock", json={"available_count": -1}, headers=admin_headers)
    assert negative.status_code == 422
    assert await stock_of(item_id) == 0

    missing = await client.patch("/admin/inventory/no-such-id/stock", json={"available_count": 3}, headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_update_item_details(client, admin_headers, make_item):
    item_id = await make_item("Veg Roll", available_count=4)

    resp = await client.put(
        f"/admin/inventory/{item_id}",
        json={"description": "Crisp paratha, spiced veggies", "price": ["₹110"]},
        headers=admin_headers,
    )

    assert resp.json()["description"] == "Crisp paratha, spiced veggies"
    assert resp.json()["price"] == ["₹110"]
    assert resp.json()["available_count"] == 4


@pytest.mark.asyncio
async def test_manual_reset_requires_confirmation(client, admin_headers, make_item, stock_of, redis):
    item_id = await make_item("Veg Roll", available_count=2)

    refused = await client.post("/admin/inventory/reset", json={}, headers=admin_headers)
    assert refused.status_code == 400
    assert await stock_of(item_id) == 2

    resp = await client.post("/admin/inventory/reset", json={"confirm": True}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["reset_applied"] is True
    assert resp.json()["items_reset"] == 1
    assert await stock_of(item_id) == 12

    status = await client.get("/admin/inventory/reset", headers=admin_headers)
    assert status.json()["last_reset"] == status.json()["today"]


@pytest.mark.asyncio
async def test_import_skips_items_already_present(client, admin_headers, make_item):
    await make_item("Veg Roll", available_count=3)

    first = await client.post("/admin/inventory/import", headers=admin_headers)
    assert first.json() == {"inserted": len(MENU_CATALOG) - 1, "skipped": 1}

    second = await client.post("/admin/inventory/import", headers=admin_headers)
    assert second.json() == {"inserted": 0, "skipped": len(MENU_CATALOG)}


@pytest.mark.asyncio
async def test_root_and_health(client):
    root = await client.get("/")
    assert root.json()["service"] == "ordering-service"

    health = await client.get("/health")
    assert health.status_code == 200
    assert health.json()["dependencies"] == {"database": "ok", "redis": "ok"}


@pytest.mark.asyncio
async def test_health_reports_reset_marker(client, redis):
    before = (await client.get("/health")).json()["inventory_reset"]
    assert before["last_reset"] is None
    assert before["up_to_date"] is False

    await redis.set("inventory:last_reset", Clock().day_marker())
    after = (await client.get("/health")).json()["inventory_reset"]

    assert after["up_to_date"] is True
    assert after["last_reset"] == after["today"]
