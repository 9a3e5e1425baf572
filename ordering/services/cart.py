"""
Ordering Service — Cart quantity guard and per-customer cart storage

Limits checked before any change:
  - at most MAX_PER_ITEM units of one line
  - at most MAX_CART_ITEMS units across the cart
  - never more than the stock reported when the item is added

A rejected change raises a CartError subclass and leaves the cart as it
was. Lines are merged on (name, price, category).
"""
import json
import logging
import random
import time

import redis.asyncio as aioredis

from ordering.core.config import get_settings
from ordering.core.errors import (
    CartItemNotFound,
    CartLimitExceeded,
    InsufficientStock,
    PerItemLimitExceeded,
)
from ordering.core.redis_client import get_redis
from ordering.schemas.cart import CartItem, CartItemIn
from ordering.schemas.order import parse_price

settings = get_settings()
logger = logging.getLogger(__name__)

CART_KEY_PREFIX = "cart:"


def _line_id(item: CartItemIn) -> str:
    return f"{item.name}-{item.price}-{item.category}-{int(time.time() * 1000)}-{random.random()}"


class Cart:
    def __init__(
        self,
        items: list[CartItem] | None = None,
        max_per_item: int | None = None,
        max_total: int | None = None,
    ):
        self.items: list[CartItem] = list(items or [])
        self.max_per_item = max_per_item or settings.MAX_PER_ITEM
        self.max_total = max_total or settings.MAX_CART_ITEMS

    def count(self) -> int:
        return sum(line.quantity for line in self.items)

    def total(self) -> float:
        return sum(parse_price(line.price) * line.quantity for line in self.items)

    def find_line(self, name: str, price: str, category: str) -> CartItem | None:
        for line in self.items:
            if line.name == name and line.price == price and line.category == category:
                return line
        return None

    def get(self, line_id: str) -> CartItem:
        for line in self.items:
            if line.id == line_id:
                return line
        raise CartItemNotFound("Item is not in the cart.", details=line_id)

    def add(self, item: CartItemIn, quantity: int = 1, available: int | None = None) -> tuple[CartItem, str]:
        existing = self.find_line(item.name, item.price, item.category)
        current = existing.quantity if existing else 0

        if current + quantity > self.max_per_item:
            raise PerItemLimitExceeded(f"You can only add up to {self.max_per_item} of the same item.")
        if self.count() + quantity > self.max_total:
            raise CartLimitExceeded(f"Maximum total limit reached ({self.max_total} items).")
        if available is not None and quantity > available:
            raise InsufficientStock(f"Only {available} items left in stock.")

        if existing:
            if available is not None and existing.quantity + quantity > available:
                raise InsufficientStock(f"Sorry, only {available} items available in total.")
            existing.quantity += quantity
            return existing, f"Updated {item.name} quantity!"

        line = CartItem(id=_line_id(item), quantity=quantity, **item.model_dump())
        self.items.append(line)
        return line, f"{item.name} added to cart!"

    def update_quantity(self, line_id: str, quantity: int) -> tuple[CartItem, str]:
        line = self.get(line_id)
        if quantity <= 0:
            return self.remove(line_id)

        if quantity > self.max_per_item:
            raise PerItemLimitExceeded(f"Maximum {self.max_per_item} per item allowed.")
        others = sum(i.quantity for i in self.items if i.id != line_id)
        if others + quantity > self.max_total:
            raise CartLimitExceeded(f"Total limit is {self.max_total} items.")

        line.quantity = quantity
        return line, f"{line.name} quantity updated!"

    def remove(self, line_id: str) -> tuple[CartItem, str]:
        line = self.get(line_id)
        self.items = [i for i in self.items if i.id != line_id]
        return line, f"{line.name} removed from cart"

    def clear(self) -> None:
        self.items = []


class CartStore:
    """Cart snapshots in Redis, one key per customer."""

    def __init__(self, redis: aioredis.Redis | None = None, ttl_seconds: int | None = None):
        self._redis = redis
        self.ttl = ttl_seconds or settings.CART_TTL_SECONDS

    @property
    def redis(self) -> aioredis.Redis:
        return self._redis or get_redis()

    @staticmethod
    def key(owner: str) -> str:
        return f"{CART_KEY_PREFIX}{owner}"

    async def load(self, owner: str) -> Cart:
        raw = await self.redis.get(self.key(owner))
        if not raw:
            return Cart()
        try:
            lines = [CartItem.model_validate(line) for line in json.loads(raw)]
        except ValueError:
            logger.error("Discarding unreadable cart snapshot for %s", owner)
            return Cart()
        return Cart(lines)

    async def save(self, owner: str, cart: Cart) -> None:
        snapshot = json.dumps([line.model_dump(by_alias=True) for line in cart.items])
        await self.redis.setex(self.key(owner), self.ttl, snapshot)

    async def clear(self, owner: str) -> None:
        await self.redis.delete(self.key(owner))
