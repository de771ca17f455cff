from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from .base import BaseSchema


class ProductDiscountCreate(BaseModel):
    disc_code: Optional[str] = None
    disc_type: Optional[str] = None
    disc_perc: Optional[Decimal] = None
    disc_amt: Optional[Decimal] = None
    target_type: Optional[str] = None
    target_id: Optional[int] = None
    target_product_type: Optional[str] = None
    disc_from_amt: Optional[Decimal] = None
    disc_to_amt: Optional[Decimal] = None
    disc_status: Optional[str] = None
    disc_valid_from: Optional[str] = None
    disc_valid_to: Optional[str] = None
    disc_once_only: Optional[str] = None
    disc_free_shipping: Optional[bool] = None
    disc_multi_by_qty: Optional[bool] = None
    disc_compoundable: Optional[bool] = None
    disc_allow_on_forms: Optional[bool] = None
    disc_notes: Optional[str] = None


class ProductDiscountUpdate(ProductDiscountCreate):
    pass


class ProductDiscountOut(BaseSchema):
    id: int
    disc_code: str
    disc_type: str
    disc_perc: Optional[Decimal] = None
    disc_amt: Optional[Decimal] = None
    target_type: str
    target_id: Optional[int] = None
    target_product_type: Optional[str] = None
    disc_from_amt: Decimal
    disc_to_amt: Decimal
    disc_status: str
    disc_valid_from: str
    disc_valid_to: str
    disc_once_only: str
    disc_free_shipping: bool
    disc_multi_by_qty: bool
    disc_compoundable: bool
    disc_allow_on_forms: bool
    disc_notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductDiscountListOut(BaseModel):
    discounts: list[ProductDiscountOut]
    total: int
    page: int
    limit: int
    total_pages: int


class ProductDiscountStatsOut(BaseModel):
    total: int
    active: int
    inactive: int
    by_target: dict[str, int]
    percentage: int
    amount: int
