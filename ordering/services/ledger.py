"""
Ordering Service — Inventory ledger operations

Lookups follow the storefront's rules: a line item that carries a real
inventory id is matched by id, anything else by case-insensitive, trimmed
exact name. A name that matches several rows counts as a miss.

None of these helpers commit; callers decide the transaction boundary.
"""
import logging
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.core.errors import NotFound
from ordering.models.inventory import MenuItem

logger = logging.getLogger(__name__)

STATIC_ID_PREFIX = "static"


@dataclass
class StockChange:
    menu_item_id: str
    name: str
    before: int
    after: int

    @property
    def delta(self) -> int:
        return self.after - self.before


def has_inventory_id(menu_item_id: str | None) -> bool:
    """Ids such as "static-3" come from the bundled menu, not the table."""
    return bool(menu_item_id) and not menu_item_id.startswith(STATIC_ID_PREFIX)


def normalize_name(name: str) -> str:
    return name.strip().lower()


async def find_by_name(db: AsyncSession, name: str) -> MenuItem | None:
    result = await db.execute(
        select(MenuItem).where(func.lower(func.trim(MenuItem.name)) == normalize_name(name))
    )
    matches = result.scalars().all()
    if len(matches) > 1:
        logger.warning("Inventory name %r is ambiguous (%d rows); treating as not found", name, len(matches))
        return None
    return matches[0] if matches else None


async def find_for_line(db: AsyncSession, name: str, menu_item_id: str | None = None) -> MenuItem | None:
    if has_inventory_id(menu_item_id):
        return await db.get(MenuItem, menu_item_id)
    return await find_by_name(db, name)


async def get_item(db: AsyncSession, item_id: str) -> MenuItem:
    item = await db.get(MenuItem, item_id)
    if item is None:
        raise NotFound("Menu item not found in inventory.", details=item_id)
    return item


def decrement(item: MenuItem, quantity: int) -> StockChange:
    """Clamped at zero; never goes negative."""
    before = item.available_count or 0
    item.available_count = max(0, before - quantity)
    return StockChange(item.id, item.name, before, item.available_count)


def credit(item: MenuItem, quantity: int) -> StockChange:
    before = item.available_count or 0
    item.available_count = before + quantity
    return StockChange(item.id, item.name, before, item.available_count)


def set_count(item: MenuItem, count: int) -> StockChange:
    if count < 0:
        raise ValueError("available_count must be non-negative")
    before = item.available_count or 0
    item.available_count = count
    return StockChange(item.id, item.name, before, count)


async def list_items(db: AsyncSession, order_by_category: bool = True) -> list[MenuItem]:
    query = select(MenuItem)
    if order_by_category:
        query = query.order_by(MenuItem.category.asc(), MenuItem.name.asc())
    else:
        query = query.order_by(MenuItem.name.asc())
    result = await db.execute(query)
    return list(result.scalars().all())


async def reset_all(db: AsyncSession) -> int:
    """Restore every row to its daily cap. Returns the number of rows touched."""
    result = await db.execute(
        update(MenuItem)
        .values(available_count=MenuItem.daily_cap)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount or 0


async def import_catalog(db: AsyncSession, catalog: Iterable[dict], cap: int) -> tuple[int, int]:
    """Insert catalog entries whose name is not in the table yet."""
    existing = {normalize_name(item.name) for item in await list_items(db)}
    inserted = skipped = 0
    for entry in catalog:
        key = normalize_name(entry["name"])
        if key in existing:
            skipped += 1
            continue
        db.add(MenuItem(
            name=entry["name"],
            description=entry.get("description"),
            category=entry["category"],
            price=list(entry["price"]),
            size=list(entry.get("size") or []),
            type=entry.get("type") or "",
            image=entry.get("image"),
            available_count=cap,
            daily_cap=cap,
        ))
        existing.add(key)
        inserted += 1
    return inserted, skipped
