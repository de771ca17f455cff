from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .base import BaseSchema


class DealRewardSkuIn(BaseModel):
    sku: str
    quantity: Optional[int] = 1
    price_override: Optional[Decimal] = None


class DealRewardSkuOut(BaseSchema):
    id: int
    sku: str
    quantity: int
    price_override: Optional[Decimal] = None


class DealCreate(BaseModel):
    description: str
    start_price: Decimal
    end_price: Decimal
    units: Optional[int] = 0
    active: Optional[bool] = True
    reward_auto_add: Optional[bool] = False
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    reward_skus: list[DealRewardSkuIn] = Field(default_factory=list)


class DealUpdate(BaseModel):
    description: Optional[str] = None
    start_price: Optional[Decimal] = None
    end_price: Optional[Decimal] = None
    units: Optional[int] = None
    active: Optional[bool] = None
    reward_auto_add: Optional[bool] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    reward_skus: Optional[list[DealRewardSkuIn]] = None


class DealOut(BaseSchema):
    id: int
    description: str
    start_price: Decimal
    end_price: Decimal
    units: int
    active: bool
    reward_auto_add: bool
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    reward_skus: list[DealRewardSkuOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DealListOut(BaseModel):
    deals: list[DealOut]
    total: int
    page: int
    limit: int
    total_pages: int


class DealStatsOut(BaseModel):
    total: int
    active: int
    inactive: int
    auto_add: int
