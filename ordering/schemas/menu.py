"""
Ordering Service — Menu / inventory schemas (snake_case, as stored)
"""
from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field


def _as_price_list(value: Any) -> Any:
    if value is None or isinstance(value, list):
        return value
    return [str(value)]


PriceList = Annotated[list[str], BeforeValidator(_as_price_list)]


class MenuItemOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    category: str
    price: list[str]
    size: list[str] = []
    type: str = ""
    image: str | None = None
    available_count: int
    daily_cap: int
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class MenuItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    price: PriceList = Field(..., min_length=1, examples=[["₹100"]])
    description: str | None = None
    size: list[str] = []
    type: str = ""
    image: str | None = "/menuimages/vegroll.png"
    available_count: int | None = Field(None, ge=0)


class MenuItemUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    category: str | None = Field(None, min_length=1, max_length=100)
    price: PriceList | None = None
    description: str | None = None
    size: list[str] | None = None
    type: str | None = None
    image: str | None = None
    available_count: int | None = Field(None, ge=0)


class StockUpdate(BaseModel):
    available_count: int = Field(..., ge=0)


class ResetRequest(BaseModel):
    confirm: bool = False


class ResetStatus(BaseModel):
    last_reset: str | None
    today: str
    reset_applied: bool = False
    items_reset: int = 0


class ImportResult(BaseModel):
    inserted: int
    skipped: int
