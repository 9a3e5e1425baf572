"""
Ordering Service — Customer order routes

Flow for POST /orders:
  1. JWT validated by middleware (request.state.user set)
  2. Idempotency-Key replay handled by IdempotencyMiddleware
  3. Best-effort stock decrement, then pending order insert
  4. Customer's cart cleared; order waits for admin approval
"""
import logging

from fastapi import APIRouter, Depends, status
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.api.deps import get_cart_store, get_current_user
from ordering.db.database import get_db
from ordering.schemas.order import OrderOut, OrderRequest, OrderResponse
from ordering.services import intake, lifecycle
from ordering.services.cart import CartStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderResponse, status_code=status.HTTP_200_OK)
async def create_order_request(
    payload: OrderRequest,
    user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: CartStore = Depends(get_cart_store),
):
    """Place an order request. Stock is decremented now; payment comes after approval."""
    order = await intake.submit_order(db, payload)
    try:
        await store.clear(user["sub"])
    except (RedisError, OSError) as exc:
        # order already committed
        logger.warning("Could not clear cart for %s after order %s: %s", user["sub"], order.id, exc)
    return OrderResponse(
        success=True,
        order=OrderOut.from_row(order),
        message="Order request created successfully. Waiting for admin approval.",
    )


@router.get("/mine", response_model=list[OrderOut])
async def list_my_orders(user: dict = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Orders placed under the signed-in customer's email, newest first."""
    user_id = user.get("email") or user["sub"]
    return [OrderOut.from_row(o) for o in await lifecycle.list_orders_for_user(db, user_id)]
