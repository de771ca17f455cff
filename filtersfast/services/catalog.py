from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from sqlalchemy.orm import Session

from filtersfast.crud import deals as deals_crud
from filtersfast.crud import products as products_crud
from filtersfast.crud import tier_pricing as tier_pricing_crud
from filtersfast.models.deal import Deal
from filtersfast.models.product import Product
from filtersfast.models.tier_pricing import TierPricing


class PricingCatalog(Protocol):
    """Read-side collaborators the pricing core depends on. Misses return None."""

    def get_product_by_id(self, product_id: str | int) -> Optional[Product]: ...

    def get_product_by_sku(self, sku: str) -> Optional[Product]: ...

    def get_applicable_deal(self, subtotal: Decimal) -> Optional[Deal]: ...

    def get_tier_pricing_by_product_id(self, product_id: int) -> Optional[TierPricing]: ...

    def get_tier_pricing_by_sku(self, sku: str) -> Optional[TierPricing]: ...


class SqlCatalog:
    def __init__(self, db: Session):
        self.db = db

    def get_product_by_id(self, product_id: str | int) -> Optional[Product]:
        return products_crud.get_product_by_id(self.db, product_id)

    def get_product_by_sku(self, sku: str) -> Optional[Product]:
        return products_crud.get_product_by_sku(self.db, sku)

    def get_applicable_deal(self, subtotal: Decimal) -> Optional[Deal]:
        return deals_crud.get_applicable_deal(self.db, subtotal)

    def get_tier_pricing_by_product_id(self, product_id: int) -> Optional[TierPricing]:
        return tier_pricing_crud.get_tier_pricing_by_product_id(self.db, product_id)

    def get_tier_pricing_by_sku(self, sku: str) -> Optional[TierPricing]:
        return tier_pricing_crud.get_tier_pricing_by_sku(self.db, sku)
