"""
Order intake: best-effort stock decrement followed by the pending order insert.
"""
import re

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from ordering.core.errors import StoreError
from ordering.models.order import Order, OrderStatus, PaymentStatus
from ordering.schemas.order import OrderRequest
from ordering.services import intake


def _request(items, total=None) -> OrderRequest:
    subtotal = sum(i["price"] * i["quantity"] for i in items)
    total = subtotal if total is None else total
    return OrderRequest.model_validate({
        "items": items,
        "userDetails": {"name": "Asha Rao", "email": "asha.rao@gmail.com", "phone": "9876543210"},
        "visitTime": "2026-10-19T13:30",
        "subtotal": subtotal,
        "advanceAmount": total / 2,
        "remainingAmount": total / 2,
        "totalAmount": total,
    })


def test_identifiers_format():
    order_id, invoice = intake.generate_identifiers(now_ms=1760000000000)
    assert re.fullmatch(r"ORD_1760000000000_[0-9a-z]{9}", order_id)
    assert re.fullmatch(r"INV_1760000000000_[0-9a-z]{6}", invoice)


@pytest.mark.asyncio
async def test_submit_decrements_and_stores_pending_order(db, make_item, stock_of):
    roll_id = await make_item("Veg Roll", available_count=5)

    order = await intake.submit_order(db, _request([{"name": "Veg Roll", "price": 100, "quantity": 2}]))

    assert await stock_of(roll_id) == 3
    assert order.status == OrderStatus.PENDING
    assert order.payment_status == PaymentStatus.PENDING
    assert order.total_amount == 200
    assert order.user_id == "asha.rao@gmail.com"
    assert order.payment_id == ""
    assert order.id == order.order_id
    assert order.restaurant_details["name"]


@pytest.mark.asyncio
async def test_shortfall_clamps_at_zero_and_order_is_still_created(db, make_item, stock_of):
    burger_id = await make_item("Chicken Tikka Burger", available_count=1, category="Burgers")

    order = await intake.submit_order(
        db, _request([{"name": "Chicken Tikka Burger", "price": 180, "quantity": 3}])
    )

    assert await stock_of(burger_id) == 0
    stored = (await db.execute(select(Order).where(Order.id == order.id))).scalar_one()
    assert stored.status == OrderStatus.PENDING


@pytest.mark.asyncio
async def test_unknown_item_is_skipped_without_touching_others(db, make_item, stock_of):
    roll_id = await make_item("Veg Roll", available_count=5)

    order = await intake.submit_order(db, _request([
        {"name": "Mystery Shake", "price": 90, "quantity": 1},
        {"name": "Veg Roll", "price": 100, "quantity": 1},
    ]))

    assert order.id
    assert await stock_of(roll_id) == 4


@pytest.mark.asyncio
async def test_lines_match_by_inventory_id_then_by_trimmed_name(db, make_item, stock_of):
    fries_id = await make_item("Original Salted Fries", available_count=6, category="Sides")
    pasta_id = await make_item("Alfredo Pasta", available_count=6, category="Pasta")

    await intake.submit_order(db, _request([
        {"name": "renamed on the client", "price": 90, "quantity": 2, "menuItemId": fries_id},
        {"name": "  alfredo PASTA ", "price": 220, "quantity": 1, "menuItemId": "static-7"},
    ]))

    assert await stock_of(fries_id) == 4
    assert await stock_of(pasta_id) == 5


@pytest.mark.asyncio
async def test_ambiguous_name_is_a_miss(db, make_item, stock_of):
    first = await make_item("Veg Roll", available_count=5)
    second = await make_item("veg roll", available_count=5)

    await intake.submit_order(db, _request([{"name": "Veg Roll", "price": 100, "quantity": 1}]))

    assert await stock_of(first) == 5
    assert await stock_of(second) == 5


@pytest.mark.asyncio
async def test_failed_insert_restores_decremented_stock(db, make_item, stock_of, monkeypatch):
    roll_id = await make_item("Veg Roll", available_count=5)
    dip_id = await make_item("Mayo Dip", available_count=1, category="Sides")

    async def _broken_insert(session, order):
        raise OperationalError("INSERT INTO invoices", {}, Exception("disk full"))

    monkeypatch.setattr(intake, "_insert_order", _broken_insert)

    with pytest.raises(StoreError) as exc_info:
        await intake.submit_order(db, _request([
            {"name": "Veg Roll", "price": 100, "quantity": 2},
            {"name": "Mayo Dip", "price": 20, "quantity": 3},
        ]))

    assert exc_info.value.message == "Failed to store order"
    assert await stock_of(roll_id) == 5
    # only the one unit actually removed comes back
    assert await stock_of(dip_id) == 1
    assert (await db.execute(select(Order))).scalars().all() == []


@pytest.mark.asyncio
async def test_stock_changes_are_published(db, make_item, redis):
    await make_item("Veg Roll", available_count=5)
    pubsub = redis.pubsub()
    await pubsub.subscribe("menu_items:changes")
    await pubsub.get_message(timeout=0.1)  # subscribe confirmation

    await intake.submit_order(db, _request([{"name": "Veg Roll", "price": 100, "quantity": 1}]))

    message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
    assert message is not None
    assert '"available_count": 4' in message["data"]
    await pubsub.aclose()
