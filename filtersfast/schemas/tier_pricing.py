from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .base import BaseSchema


class TierIn(BaseModel):
    min_quantity: int = Field(ge=1)
    max_quantity: Optional[int] = Field(default=None, ge=1)
    discount_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    discount_amount: Optional[Decimal] = Field(default=None, ge=0)
    fixed_price: Optional[Decimal] = Field(default=None, ge=0)


class TierOut(TierIn, BaseSchema):
    position: int


class TierPricingBase(BaseModel):
    product_id: Optional[int] = Field(default=None, ge=1)
    sku: Optional[str] = Field(default=None, max_length=64)
    category_id: Optional[int] = Field(default=None, ge=1)


class TierPricingCreate(TierPricingBase):
    tiers: list[TierIn] = Field(default_factory=list)


class TierPricingUpdate(BaseModel):
    product_id: Optional[int] = Field(default=None, ge=1)
    sku: Optional[str] = Field(default=None, max_length=64)
    category_id: Optional[int] = Field(default=None, ge=1)
    tiers: Optional[list[TierIn]] = None


class TierPricingOut(TierPricingBase, BaseSchema):
    id: int
    tiers: list[TierOut] = []


class TierValidateRequest(BaseModel):
    tiers: list[TierIn] = Field(default_factory=list)


class TierValidateResponse(BaseModel):
    valid: bool
    errors: list[str]


class TierQuoteRequest(BaseModel):
    base_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)
    product_id: Optional[int] = None
    sku: Optional[str] = None
    moq: Optional[int] = Field(default=None, ge=1)


class TierSnapshotOut(BaseSchema):
    min_quantity: int
    max_quantity: Optional[int] = None
    discount_percentage: Optional[Decimal] = None
    discount_amount: Optional[Decimal] = None
    fixed_price: Optional[Decimal] = None


class TierPricingResultOut(BaseSchema):
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    tier_applied: Optional[TierSnapshotOut] = None
    savings: Decimal
    savings_percentage: Decimal


class PriceBreakOut(BaseModel):
    quantity: int
    unit_price: Decimal
    savings: Decimal


class MoqIncentiveOut(BaseModel):
    should_order: int
    savings: Decimal
    message: str


class TierQuoteResponse(BaseModel):
    pricing: TierPricingResultOut
    display: dict[str, Optional[str]]
    moq_incentive: Optional[MoqIncentiveOut] = None
