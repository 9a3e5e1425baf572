"""
Ordering Service — Admin order routes (approval dashboard)
"""
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.api.deps import require_admin
from ordering.core.events import ORDERS_CHANNEL, sse_events
from ordering.db.database import get_db
from ordering.models.order import OrderStatus
from ordering.schemas.order import (
    OrderOut,
    OrderTransitionResponse,
    StatusUpdateRequest,
    StockAdjustment,
)
from ordering.services import lifecycle
from ordering.services.lifecycle import TransitionResult

router = APIRouter(prefix="/admin/orders", tags=["admin"], dependencies=[Depends(require_admin)])

_STATUS_TEXT = {
    OrderStatus.APPROVED: "approved",
    OrderStatus.CANCELLED: "rejected",
    OrderStatus.CONFIRMED: "confirmed",
    OrderStatus.COMPLETED: "completed",
}


def _transition_response(result: TransitionResult) -> OrderTransitionResponse:
    status = OrderStatus(result.order.status)
    return OrderTransitionResponse(
        order=OrderOut.from_row(result.order),
        message=f"Order {_STATUS_TEXT.get(status, status.value)} successfully",
        credited=[
            StockAdjustment(
                name=c.name,
                quantity=c.delta,
                menu_item_id=c.menu_item_id,
                available_count=c.after,
            )
            for c in result.credited
        ],
        skipped=result.skipped,
    )


@router.get("", response_model=list[OrderOut])
async def list_orders(
    status: OrderStatus | None = Query(None, description="Filter by status"),
    q: str | None = Query(None, description="Search invoice number, customer name or email"),
    db: AsyncSession = Depends(get_db),
):
    """All orders, newest first."""
    return [OrderOut.from_row(o) for o in await lifecycle.list_orders(db, status=status, search=q)]


@router.get("/stream")
async def stream_order_changes(request: Request):
    """SSE stream of new orders and status changes for the dashboard."""
    return StreamingResponse(
        sse_events(ORDERS_CHANNEL, request),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
            "Connection": "keep-alive",
        },
    )


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(order_id: str, db: AsyncSession = Depends(get_db)):
    return OrderOut.from_row(await lifecycle.get_order(db, order_id))


@router.post("/{order_id}/approve", response_model=OrderTransitionResponse)
async def approve_order(order_id: str, db: AsyncSession = Depends(get_db)):
    return _transition_response(await lifecycle.approve_order(db, order_id))


@router.post("/{order_id}/cancel", response_model=OrderTransitionResponse)
async def cancel_order(order_id: str, db: AsyncSession = Depends(get_db)):
    """Reject a pending order and put its quantities back on the shelf."""
    return _transition_response(await lifecycle.cancel_order(db, order_id))


@router.patch("/{order_id}/status", response_model=OrderTransitionResponse)
async def update_order_status(order_id: str, payload: StatusUpdateRequest, db: AsyncSession = Depends(get_db)):
    return _transition_response(await lifecycle.transition_order(db, order_id, payload.status))
