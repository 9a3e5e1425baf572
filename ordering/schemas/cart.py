"""
Ordering Service — Cart schemas (camelCase on the wire)
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CartItemIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: str = Field(..., min_length=1, examples=["₹100"])
    category: str = Field(..., min_length=1)
    description: str = ""
    image: str = ""
    selected_size: str | None = None
    type: str | None = None
    menu_item_id: str | None = None


class CartItem(CartItemIn):
    id: str
    quantity: int = Field(..., ge=1)


class AddToCartRequest(CamelModel):
    item: CartItemIn
    quantity: int = Field(1, ge=1)
    available_count: int | None = Field(None, ge=0)


class UpdateQuantityRequest(CamelModel):
    quantity: int


class CartOut(CamelModel):
    items: list[CartItem]
    total: float
    count: int
    max_total_items: int
    message: str | None = None
