from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from .base import BaseSchema


class OrderDiscountCreate(BaseModel):
    disc_code: Optional[str] = None
    disc_perc: Optional[Decimal] = None
    disc_amt: Optional[Decimal] = None
    disc_from_amt: Optional[Decimal] = None
    disc_to_amt: Optional[Decimal] = None
    disc_status: Optional[str] = None
    disc_once_only: Optional[str] = None
    disc_valid_from: Optional[str] = None
    disc_valid_to: Optional[str] = None


class OrderDiscountUpdate(OrderDiscountCreate):
    pass


class OrderDiscountOut(BaseSchema):
    id: int
    disc_code: str
    disc_perc: Optional[Decimal] = None
    disc_amt: Optional[Decimal] = None
    disc_from_amt: Decimal
    disc_to_amt: Decimal
    disc_status: str
    disc_once_only: str
    disc_valid_from: str
    disc_valid_to: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderDiscountListOut(BaseModel):
    discounts: list[OrderDiscountOut]
    total: int
    page: int
    limit: int
    total_pages: int


class OrderDiscountStatsOut(BaseModel):
    total: int
    active: int
    inactive: int
    used: int
    once_only: int
    reusable: int
