"""
Ordering Service — Inventory ledger model

[CONFIG DATA]        name, category, price, size, image — edited by admins
[TRANSACTIONAL DATA] available_count — decremented by orders, credited on
                     cancellation, restored to daily_cap by the daily reset
"""
import uuid
from datetime import datetime
from sqlalchemy import JSON, String, Integer, DateTime, func, Text
from sqlalchemy.orm import Mapped, mapped_column

from ordering.core.config import get_settings
from ordering.db.database import Base

settings = get_settings()


class MenuItem(Base):
    """
    One row per menu item. Never hard-deleted.
    price holds one string per size variant, e.g. ["₹150", "₹250"].
    """
    __tablename__ = "menu_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="Rolls")
    price: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    size: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    available_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=lambda: settings.DAILY_STOCK_CAP
    )
    daily_cap: Mapped[int] = mapped_column(
        Integer, nullable=False, default=lambda: settings.DAILY_STOCK_CAP
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<MenuItem name={self.name!r} available={self.available_count}>"
