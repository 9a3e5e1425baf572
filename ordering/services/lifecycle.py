"""
Ordering Service — Order lifecycle

    pending ──► approved ──► confirmed ──► completed
       │            └──────────────────────► completed
       └──► cancelled

Cancelling a pending order credits each line's quantity back to the
inventory row with the same name. Status, timestamp and credits commit
together; on failure nothing advances.
"""
import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.core.clock import utcnow
from ordering.core.errors import InvalidTransition, NotFound, StoreError
from ordering.core.events import ORDERS_CHANNEL, publish_event, publish_stock_change
from ordering.models.order import Order, OrderStatus
from ordering.services import ledger
from ordering.services.ledger import StockChange

logger = logging.getLogger(__name__)

TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.APPROVED, OrderStatus.CANCELLED}),
    OrderStatus.APPROVED: frozenset({OrderStatus.CONFIRMED, OrderStatus.COMPLETED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in TRANSITIONS[current]


def check_transition(current: OrderStatus, target: OrderStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(
            f"Cannot move order from '{current.value}' to '{target.value}'.",
            details=f"allowed: {sorted(s.value for s in TRANSITIONS[current]) or 'none'}",
        )


@dataclass
class TransitionResult:
    order: Order
    credited: list[StockChange] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


async def get_order(db: AsyncSession, order_id: str) -> Order:
    order = await db.get(Order, order_id)
    if order is None:
        raise NotFound("Order not found.", details=order_id)
    return order


async def list_orders(
    db: AsyncSession,
    status: OrderStatus | None = None,
    search: str | None = None,
) -> list[Order]:
    """Newest first. search matches invoice number, customer name or email."""
    query = select(Order).order_by(Order.created_at.desc())
    if status is not None:
        query = query.where(Order.status == status)
    result = await db.execute(query)
    orders = list(result.scalars().all())

    if search:
        term = search.lower()
        orders = [
            o for o in orders
            if term in o.invoice_number.lower()
            or term in str((o.user_details or {}).get("name", "")).lower()
            or term in str((o.user_details or {}).get("email", "")).lower()
        ]
    return orders


async def list_orders_for_user(db: AsyncSession, user_id: str) -> list[Order]:
    result = await db.execute(
        select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc())
    )
    return list(result.scalars().all())


async def _credit_back(db: AsyncSession, items: list[dict]) -> tuple[list[StockChange], list[str]]:
    credited: list[StockChange] = []
    skipped: list[str] = []
    for line in items or []:
        name = str(line.get("name", ""))
        quantity = int(line.get("quantity") or 1)
        item = await ledger.find_by_name(db, name) if name.strip() else None
        if item is None:
            logger.warning('No inventory record named "%s"; %d unit(s) not credited back', name, quantity)
            skipped.append(name)
            continue
        credited.append(ledger.credit(item, quantity))
    return credited, skipped


async def transition_order(db: AsyncSession, order_id: str, target: OrderStatus) -> TransitionResult:
    order = await get_order(db, order_id)
    current = OrderStatus(order.status)
    check_transition(current, target)

    result = TransitionResult(order=order)
    try:
        order.status = target
        order.updated_at = utcnow()
        if target is OrderStatus.CANCELLED:
            result.credited, result.skipped = await _credit_back(db, order.items)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Failed to move order %s from %s to %s", order_id, current.value, target.value)
        raise StoreError("Failed to update order status", details=str(exc), code=getattr(exc, "code", None))

    logger.info("Order %s: %s -> %s", order_id, current.value, target.value)
    await publish_event(ORDERS_CHANNEL, {"event": "UPDATE", "id": order.id, "status": target.value})
    for change in result.credited:
        await publish_stock_change(change.menu_item_id, change.name, change.after)
    return result


async def approve_order(db: AsyncSession, order_id: str) -> TransitionResult:
    return await transition_order(db, order_id, OrderStatus.APPROVED)


async def cancel_order(db: AsyncSession, order_id: str) -> TransitionResult:
    return await transition_order(db, order_id, OrderStatus.CANCELLED)
