from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from filtersfast.models.b2b_account import B2BAccountStatus, PaymentTerms, PricingTier

from .base import BaseSchema
from .tier_pricing import TierPricingResultOut


class B2BAccountBase(BaseModel):
    company_name: str = Field(min_length=1, max_length=255)
    contact_email: Optional[str] = Field(default=None, max_length=255)
    status: B2BAccountStatus = B2BAccountStatus.PENDING
    pricing_tier: PricingTier = PricingTier.STANDARD
    payment_terms: PaymentTerms = PaymentTerms.PREPAY
    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    credit_limit: Optional[Decimal] = Field(default=None, ge=0)
    credit_used: Decimal = Field(default=Decimal("0"), ge=0)
    suspension_reason: Optional[str] = Field(default=None, max_length=500)
    rejection_reason: Optional[str] = Field(default=None, max_length=500)


class B2BAccountCreate(B2BAccountBase):
    pass


class B2BAccountUpdate(BaseModel):
    company_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    contact_email: Optional[str] = Field(default=None, max_length=255)
    status: Optional[B2BAccountStatus] = None
    pricing_tier: Optional[PricingTier] = None
    payment_terms: Optional[PaymentTerms] = None
    discount_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    credit_limit: Optional[Decimal] = Field(default=None, ge=0)
    credit_used: Optional[Decimal] = Field(default=None, ge=0)
    suspension_reason: Optional[str] = Field(default=None, max_length=500)
    rejection_reason: Optional[str] = Field(default=None, max_length=500)

    # credit_limit stays nullable: null means no limit.
    @field_validator(
        "company_name",
        "status",
        "pricing_tier",
        "payment_terms",
        "discount_percentage",
        "credit_used",
    )
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class B2BAccountOut(B2BAccountBase, BaseSchema):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class B2BPriceQuoteRequest(BaseModel):
    account_id: int = Field(ge=1)
    base_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)
    product_id: Optional[int] = None
    sku: Optional[str] = None


class B2BPriceQuoteResponse(BaseModel):
    account_id: int
    discounted_base_price: Decimal
    pricing: TierPricingResultOut


class CreditCheckRequest(BaseModel):
    account_id: int = Field(ge=1)
    order_total: Decimal = Field(ge=0)
    order_date: Optional[date] = None


class CreditCheckResponse(BaseModel):
    allowed: bool
    reason: Optional[str] = None
    due_date: Optional[date] = None
