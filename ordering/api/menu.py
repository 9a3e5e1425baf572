"""
Ordering Service — Public menu routes
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.core.events import MENU_CHANNEL, sse_events
from ordering.db.database import get_db
from ordering.schemas.menu import MenuItemOut
from ordering.services import ledger

router = APIRouter(prefix="/menu", tags=["menu"])


@router.get("", response_model=list[MenuItemOut])
async def get_menu(db: AsyncSession = Depends(get_db)):
    """Menu with live stock. Displayed counts never exceed the daily cap."""
    items = await ledger.list_items(db, order_by_category=False)
    out = []
    for item in items:
        view = MenuItemOut.model_validate(item)
        view.available_count = min(item.available_count, item.daily_cap)
        out.append(view)
    return out


@router.get("/stream")
async def stream_menu_changes(request: Request):
    """SSE stream of stock changes; the menu page merges them into its state."""
    return StreamingResponse(
        sse_events(MENU_CHANNEL, request),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
            "Connection": "keep-alive",
        },
    )
