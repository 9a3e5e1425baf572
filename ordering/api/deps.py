"""
Ordering Service — Shared route dependencies
"""
from typing import Any

from fastapi import HTTPException, Request, status

from ordering.core.security import is_admin
from ordering.services.cart import CartStore
from ordering.services.reset import DailyReset, RedisMarkerStore


def get_current_user(request: Request) -> dict[str, Any]:
    user = getattr(request.state, "user", None)
    if not user or not user.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(request: Request) -> dict[str, Any]:
    user = get_current_user(request)
    if not is_admin(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required.")
    return user


def get_cart_store() -> CartStore:
    return CartStore()


def get_daily_reset() -> DailyReset:
    return DailyReset(RedisMarkerStore())
