"""
Ordering Service — Payment-order schemas
"""
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PaymentOrderRequest(BaseModel):
    """Every field is optional here so that absence maps to a 400, not a 422."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    amount: float | None = None
    currency: str | None = None
    items: list[dict[str, Any]] | None = None
    visit_time: str | None = None
    user_details: dict[str, Any] | None = None

    def missing_fields(self) -> list[str]:
        required = ("amount", "items", "visit_time", "user_details")
        return [name for name in required if not getattr(self, name)]


class PaymentOrderResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order_id: str
    amount: int
    currency: str
