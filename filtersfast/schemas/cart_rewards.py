from decimal import Decimal
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, Field

from .base import CamelSchema

MAX_CART_ITEMS = 100
MAX_SUBTOTAL = Decimal("99999999.99")


class CartItemIn(CamelSchema):
    id: Optional[Union[int, str]] = None
    product_id: Optional[Union[int, str]] = Field(
        default=None,
        validation_alias=AliasChoices("product_id", "productId"),
    )
    sku: Optional[str] = Field(default=None, max_length=64)
    quantity: int = Field(ge=1, le=999)
    price: Optional[Decimal] = Field(default=None, ge=0)


class CartRewardsRequest(CamelSchema):
    items: list[CartItemIn] = Field(max_length=MAX_CART_ITEMS)
    subtotal: Optional[Decimal] = Field(default=None, ge=0, le=MAX_SUBTOTAL)


class RewardSourceOut(BaseModel):
    type: str
    id: Union[int, str]
    description: Optional[str] = None
    parent_product_id: Optional[Union[int, str]] = None


class RewardItemOut(BaseModel):
    id: str
    product_id: int
    sku: str
    name: str
    brand: Optional[str] = None
    price: Decimal
    quantity: int
    image: Optional[str] = None
    product_type: Optional[str] = None
    is_reward: bool = True
    reward_source: RewardSourceOut


class AppliedDealOut(BaseModel):
    id: int
    description: str


class CartRewardsResponse(BaseModel):
    success: bool = True
    rewards: list[RewardItemOut]
    applied_deals: list[AppliedDealOut]
