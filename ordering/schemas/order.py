"""
Ordering Service — Order schemas and storage field mapping

The invoices table uses snake_case; clients and the in-process order view
use camelCase. ORDER_FIELD_MAP is the single mapping between the two and
is applied on every read and write.
"""
import re
from datetime import datetime
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from ordering.models.order import Order, OrderStatus, PaymentStatus

ORDER_FIELD_MAP: tuple[tuple[str, str], ...] = (
    ("id", "id"),
    ("invoice_number", "invoiceNumber"),
    ("order_id", "orderId"),
    ("payment_id", "paymentId"),
    ("user_id", "userId"),
    ("user_details", "userDetails"),
    ("items", "items"),
    ("subtotal", "subtotal"),
    ("advance_amount", "advanceAmount"),
    ("remaining_amount", "remainingAmount"),
    ("total_amount", "totalAmount"),
    ("visit_time", "visitTime"),
    ("status", "status"),
    ("payment_status", "paymentStatus"),
    ("created_at", "createdAt"),
    ("updated_at", "updatedAt"),
    ("restaurant_details", "restaurantDetails"),
)
SNAKE_TO_CAMEL: dict[str, str] = dict(ORDER_FIELD_MAP)
CAMEL_TO_SNAKE: dict[str, str] = {camel: snake for snake, camel in ORDER_FIELD_MAP}

AMOUNT_TOLERANCE = 0.01
_PRICE_CLEAN = re.compile(r"[^\d.\-]")


def parse_price(value: Any) -> float:
    """Turn 120, "120", "₹120" or "₹1,200.50" into a float."""
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = _PRICE_CLEAN.sub("", str(value))
    if not cleaned:
        raise ValueError(f"Unparseable price: {value!r}")
    return float(cleaned)


def record_to_order(record: dict[str, Any]) -> dict[str, Any]:
    """snake_case storage record -> camelCase order."""
    order = {camel: record.get(snake) for snake, camel in ORDER_FIELD_MAP}
    order["status"] = order["status"] or OrderStatus.PENDING.value
    order["paymentStatus"] = order["paymentStatus"] or PaymentStatus.PENDING.value
    return order


def order_to_record(order: dict[str, Any]) -> dict[str, Any]:
    """camelCase order -> snake_case storage record. Unknown keys are dropped."""
    return {CAMEL_TO_SNAKE[key]: value for key, value in order.items() if key in CAMEL_TO_SNAKE}


def row_to_record(row: Order) -> dict[str, Any]:
    record = {}
    for snake, _ in ORDER_FIELD_MAP:
        value = getattr(row, snake)
        if isinstance(value, (OrderStatus, PaymentStatus)):
            value = value.value
        record[snake] = value
    return record


# ─── Request models ────────────────────────────────────────────────────────────

class UserDetails(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=3, max_length=32)


class OrderLineItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    name: str = Field(..., min_length=1, max_length=255, examples=["Veg Roll"])
    price: float = Field(..., ge=0)
    quantity: int = Field(1, ge=1)
    category: str | None = None
    selected_size: str | None = Field(
        None,
        validation_alias=AliasChoices("selectedSize", "selected_size"),
        serialization_alias="selectedSize",
    )
    menu_item_id: str | None = Field(
        None,
        validation_alias=AliasChoices("menuItemId", "menu_item_id"),
        serialization_alias="menuItemId",
    )

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value: Any) -> float:
        return parse_price(value)

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class OrderRequest(BaseModel):
    items: list[OrderLineItem] = Field(..., min_length=1)
    user_details: UserDetails = Field(..., alias="userDetails")
    visit_time: str = Field(..., alias="visitTime", min_length=1)
    subtotal: float = Field(..., ge=0)
    advance_amount: float = Field(0, alias="advanceAmount", ge=0)
    remaining_amount: float = Field(0, alias="remainingAmount", ge=0)
    total_amount: float = Field(..., alias="totalAmount", ge=0)

    @model_validator(mode="after")
    def _amounts_balance(self):
        if self.total_amount + AMOUNT_TOLERANCE < self.subtotal:
            raise ValueError("totalAmount cannot be less than subtotal")
        if abs(self.advance_amount + self.remaining_amount - self.total_amount) > AMOUNT_TOLERANCE:
            raise ValueError("advanceAmount + remainingAmount must equal totalAmount")
        return self


class StatusUpdateRequest(BaseModel):
    status: OrderStatus


# ─── Response models ───────────────────────────────────────────────────────────

class OrderOut(BaseModel):
    model_config = ConfigDict(alias_generator=lambda name: SNAKE_TO_CAMEL[name], populate_by_name=True)

    id: str
    invoice_number: str
    order_id: str
    payment_id: str
    user_id: str
    user_details: dict[str, Any]
    items: list[dict[str, Any]]
    subtotal: float
    advance_amount: float
    remaining_amount: float
    total_amount: float
    visit_time: str
    status: OrderStatus
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime
    restaurant_details: dict[str, Any] | None = None

    @classmethod
    def from_row(cls, row: Order) -> "OrderOut":
        return cls.model_validate(record_to_order(row_to_record(row)))


class OrderResponse(BaseModel):
    success: bool = True
    order: OrderOut
    message: str


class StockAdjustment(BaseModel):
    name: str
    quantity: int
    menu_item_id: str | None = Field(None, serialization_alias="menuItemId")
    available_count: int | None = Field(None, serialization_alias="availableCount")


class OrderTransitionResponse(BaseModel):
    success: bool = True
    order: OrderOut
    message: str
    credited: list[StockAdjustment] = []
    skipped: list[str] = []
