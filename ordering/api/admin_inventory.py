"""
Ordering Service — Admin inventory routes
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.api.deps import get_daily_reset, require_admin
from ordering.core.config import get_settings
from ordering.core.errors import StoreError
from ordering.core.events import publish_stock_change
from ordering.db.database import get_db
from ordering.db.seed import MENU_CATALOG
from ordering.models.inventory import MenuItem
from ordering.schemas.menu import (
    ImportResult,
    MenuItemCreate,
    MenuItemOut,
    MenuItemUpdate,
    ResetRequest,
    ResetStatus,
    StockUpdate,
)
from ordering.services import ledger
from ordering.services.reset import DailyReset

settings = get_settings()
logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin/inventory", tags=["admin"], dependencies=[Depends(require_admin)])


async def _commit(db: AsyncSession, action: str) -> None:
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Inventory %s failed", action)
        raise StoreError(f"Failed to {action}", details=str(exc), code=getattr(exc, "code", None))


@router.get("", response_model=list[MenuItemOut])
async def list_inventory(db: AsyncSession = Depends(get_db)):
    """Raw counts, grouped by category."""
    return await ledger.list_items(db)


@router.post("", response_model=MenuItemOut, status_code=status.HTTP_201_CREATED)
async def create_item(payload: MenuItemCreate, db: AsyncSession = Depends(get_db)):
    count = payload.available_count if payload.available_count is not None else settings.DAILY_STOCK_CAP
    item = MenuItem(
        name=payload.name,
        category=payload.category,
        price=payload.price,
        description=payload.description,
        size=payload.size,
        type=payload.type,
        image=payload.image,
        available_count=count,
        daily_cap=settings.DAILY_STOCK_CAP,
    )
    db.add(item)
    await _commit(db, "add item")
    await db.refresh(item)
    logger.info("New menu item %s with %d in stock", item.name, item.available_count)
    return item


@router.put("/{item_id}", response_model=MenuItemOut)
async def update_item(item_id: str, payload: MenuItemUpdate, db: AsyncSession = Depends(get_db)):
    item = await ledger.get_item(db, item_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in ("name", "category", "price", "size", "type", "available_count"):
            continue
        setattr(item, field, value)
    await _commit(db, "save item")
    await db.refresh(item)
    await publish_stock_change(item.id, item.name, item.available_count)
    return item


@router.patch("/{item_id}/stock", response_model=MenuItemOut)
async def set_stock(item_id: str, payload: StockUpdate, db: AsyncSession = Depends(get_db)):
    """Set the remaining count to any non-negative value (0 marks it sold out)."""
    item = await ledger.get_item(db, item_id)
    change = ledger.set_count(item, payload.available_count)
    await _commit(db, "update stock")
    await db.refresh(item)
    logger.info("Stock for %s set by admin: %d -> %d", change.name, change.before, change.after)
    await publish_stock_change(item.id, item.name, item.available_count)
    return item


@router.get("/reset", response_model=ResetStatus)
async def reset_status(reset: DailyReset = Depends(get_daily_reset)):
    outcome = await reset.status()
    return ResetStatus(**outcome.as_dict())


@router.post("/reset", response_model=ResetStatus)
async def reset_all(
    payload: ResetRequest,
    db: AsyncSession = Depends(get_db),
    reset: DailyReset = Depends(get_daily_reset),
):
    """Reset every item to the daily cap right now. Requires {"confirm": true}."""
    if not payload.confirm:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Confirm resetting all items to {settings.DAILY_STOCK_CAP} units for today.",
        )
    outcome = await reset.reset_now(db)
    return ResetStatus(**outcome.as_dict())


@router.post("/import", response_model=ImportResult)
async def import_menu(db: AsyncSession = Depends(get_db)):
    """Insert the bundled catalog; items already present by name are skipped."""
    inserted, skipped = await ledger.import_catalog(db, MENU_CATALOG, settings.DAILY_STOCK_CAP)
    await _commit(db, "import menu")
    logger.info("Menu import: %d inserted, %d already present", inserted, skipped)
    return ImportResult(inserted=inserted, skipped=skipped)
