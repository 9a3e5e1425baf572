"""
Ordering Service — Cart routes (one cart per authenticated customer)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.api.deps import get_cart_store, get_current_user
from ordering.db.database import get_db
from ordering.models.inventory import MenuItem
from ordering.schemas.cart import AddToCartRequest, CartOut, UpdateQuantityRequest
from ordering.services.cart import Cart, CartStore
from ordering.services.ledger import has_inventory_id

router = APIRouter(prefix="/cart", tags=["cart"])


def _view(cart: Cart, message: str | None = None) -> CartOut:
    return CartOut(
        items=cart.items,
        total=cart.total(),
        count=cart.count(),
        max_total_items=cart.max_total,
        message=message,
    )


@router.get("", response_model=CartOut)
async def get_cart(user: dict = Depends(get_current_user), store: CartStore = Depends(get_cart_store)):
    return _view(await store.load(user["sub"]))


@router.post("/items", response_model=CartOut)
async def add_to_cart(
    payload: AddToCartRequest,
    user: dict = Depends(get_current_user),
    store: CartStore = Depends(get_cart_store),
    db: AsyncSession = Depends(get_db),
):
    """
    Add or merge a line. Stock is the inventory row's current count when the
    item carries a real id, otherwise the availableCount the menu reported.
    """
    available = payload.available_count
    if has_inventory_id(payload.item.menu_item_id):
        row = await db.get(MenuItem, payload.item.menu_item_id)
        if row is not None:
            available = row.available_count

    cart = await store.load(user["sub"])
    _, message = cart.add(payload.item, payload.quantity, available)
    await store.save(user["sub"], cart)
    return _view(cart, message)


@router.patch("/items/{line_id}", response_model=CartOut)
async def update_cart_item(
    line_id: str,
    payload: UpdateQuantityRequest,
    user: dict = Depends(get_current_user),
    store: CartStore = Depends(get_cart_store),
):
    cart = await store.load(user["sub"])
    _, message = cart.update_quantity(line_id, payload.quantity)
    await store.save(user["sub"], cart)
    return _view(cart, message)


@router.delete("/items/{line_id}", response_model=CartOut)
async def remove_cart_item(
    line_id: str,
    user: dict = Depends(get_current_user),
    store: CartStore = Depends(get_cart_store),
):
    cart = await store.load(user["sub"])
    _, message = cart.remove(line_id)
    await store.save(user["sub"], cart)
    return _view(cart, message)


@router.delete("", response_model=CartOut)
async def clear_cart(user: dict = Depends(get_current_user), store: CartStore = Depends(get_cart_store)):
    await store.clear(user["sub"])
    return _view(Cart(), "Cart cleared!")
