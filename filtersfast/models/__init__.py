# Import the declarative base
from filtersfast.db.base import Base

# Import all models so they register themselves on Base.metadata
# (Alembic autogenerate and the test fixtures rely on this).
from filtersfast.models.product import Product
from filtersfast.models.tier_pricing import TierPricing, TierPricingTier
from filtersfast.models.b2b_account import B2BAccount
from filtersfast.models.deal import Deal, DealRewardSku
from filtersfast.models.order_discount import OrderDiscount
from filtersfast.models.product_discount import ProductDiscount
