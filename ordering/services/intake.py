"""
Ordering Service — Order intake

Flow:
  1. Generate order id + invoice number (time based, random suffix)
  2. Best-effort inventory decrement per line item, one commit per line
  3. Insert the order in "pending" status, awaiting admin approval
  4. If the insert fails, credit back every decrement applied in step 2

Step 2 is not a reservation: two concurrent submissions can both read
"1 left" and both decrement to 0. Counts are clamped, never negative.
"""
import logging
import random
import string
import time

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.core.clock import utcnow
from ordering.core.config import get_settings
from ordering.core.errors import StoreError
from ordering.core.events import ORDERS_CHANNEL, publish_event, publish_stock_change
from ordering.models.inventory import MenuItem
from ordering.models.order import Order, OrderStatus, PaymentStatus
from ordering.schemas.order import OrderLineItem, OrderRequest
from ordering.services import ledger
from ordering.services.ledger import StockChange

settings = get_settings()
logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def _random_suffix(length: int) -> str:
    return "".join(random.choices(_BASE36, k=length))


def generate_identifiers(now_ms: int | None = None) -> tuple[str, str]:
    """Return (order_id, invoice_number). Uniqueness is probabilistic."""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"ORD_{now_ms}_{_random_suffix(9)}", f"INV_{now_ms}_{_random_suffix(6)}"


async def apply_decrements(db: AsyncSession, items: list[OrderLineItem]) -> list[StockChange]:
    """Decrement stock for each line. Misses and failed writes are logged and skipped."""
    changes: list[StockChange] = []
    for line in items:
        try:
            item = await ledger.find_for_line(db, line.name, line.menu_item_id)
            if item is None:
                logger.warning(
                    'Could not find inventory record for "%s" (ID: %s) to update stock.',
                    line.name, line.menu_item_id,
                )
                continue
            change = ledger.decrement(item, line.quantity)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Failed to update stock for %s", line.name)
            continue

        logger.info("Updated stock for %s: %d -> %d", change.name, change.before, change.after)
        changes.append(change)
        await publish_stock_change(change.menu_item_id, change.name, change.after)
    return changes


async def compensate(db: AsyncSession, changes: list[StockChange]) -> None:
    """Credit back what apply_decrements actually removed."""
    for change in changes:
        removed = -change.delta
        if removed <= 0:
            continue
        try:
            item = await db.get(MenuItem, change.menu_item_id)
            if item is None:
                logger.error("Cannot restore %d of %s: inventory row disappeared", removed, change.name)
                continue
            restored = ledger.credit(item, removed)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Failed to restore stock for %s after aborted order", change.name)
            continue
        logger.info("Restored stock for %s: %d -> %d", restored.name, restored.before, restored.after)
        await publish_stock_change(restored.menu_item_id, restored.name, restored.after)


async def _insert_order(db: AsyncSession, order: Order) -> None:
    db.add(order)
    await db.commit()


def build_order(payload: OrderRequest, order_id: str, invoice_number: str) -> Order:
    now = utcnow()
    return Order(
        id=order_id,
        invoice_number=invoice_number,
        order_id=order_id,
        payment_id="",
        user_id=payload.user_details.email,
        user_details=payload.user_details.model_dump(mode="json"),
        items=[line.to_storage() for line in payload.items],
        subtotal=payload.subtotal,
        advance_amount=payload.advance_amount,
        remaining_amount=payload.remaining_amount,
        total_amount=payload.total_amount,
        visit_time=payload.visit_time,
        status=OrderStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        restaurant_details=settings.restaurant_details,
        created_at=now,
        updated_at=now,
    )


async def submit_order(db: AsyncSession, payload: OrderRequest) -> Order:
    order_id, invoice_number = generate_identifiers()
    changes = await apply_decrements(db, payload.items)

    order = build_order(payload, order_id, invoice_number)
    try:
        await _insert_order(db, order)
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Failed to store order %s; restoring %d stock changes", order_id, len(changes))
        await compensate(db, changes)
        raise StoreError("Failed to store order", details=str(exc), code=getattr(exc, "code", None))

    logger.info("Order %s (%s) stored, awaiting approval", order_id, invoice_number)
    await publish_event(
        ORDERS_CHANNEL,
        {"event": "INSERT", "id": order.id, "invoiceNumber": order.invoice_number, "status": OrderStatus.PENDING.value},
    )
    return order
