"""
Ordering Service — Order (invoice) model

Stored in the "invoices" table with snake_case columns; the API exposes
the same fields in camelCase (see ordering.schemas.order).
"""
from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import JSON, String, Float, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column

from ordering.db.database import Base


class OrderStatus(str, PyEnum):
    PENDING = "pending"
    APPROVED = "approved"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, PyEnum):
    PENDING = "pending"
    ADVANCE_PAID = "advance_paid"
    FULLY_PAID = "fully_paid"
    REFUNDED = "refunded"


class Order(Base):
    """
    [TRANSACTIONAL DATA] — created pending with inventory already decremented.
    """
    __tablename__ = "invoices"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    invoice_number: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    order_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    payment_id: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    user_details: Mapped[dict] = mapped_column(JSON, nullable=False)
    items: Mapped[list] = mapped_column(JSON, nullable=False)
    subtotal: Mapped[float] = mapped_column(Float, nullable=False)
    advance_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    remaining_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    visit_time: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(OrderStatus, name="order_status", values_callable=lambda e: [m.value for m in e]),
        default=OrderStatus.PENDING,
        nullable=False,
    )
    payment_status: Mapped[str] = mapped_column(
        Enum(PaymentStatus, name="payment_status", values_callable=lambda e: [m.value for m in e]),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    restaurant_details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<Order invoice={self.invoice_number} status={self.status}>"
