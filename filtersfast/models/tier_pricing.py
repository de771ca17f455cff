from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filtersfast.db.base import Base
from filtersfast.models.mixins import TimestampMixin


class TierPricing(TimestampMixin, Base):
    """
    Volume pricing table for one scope.
    At most one of product_id / sku / category_id is set; none means global.
    """
    __tablename__ = "tier_pricing"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    product_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    sku: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    category_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    tiers: Mapped[list["TierPricingTier"]] = relationship(
        "TierPricingTier",
        back_populates="tier_pricing",
        cascade="all, delete-orphan",
        order_by="TierPricingTier.position",
    )


class TierPricingTier(Base):
    __tablename__ = "tier_pricing_tier"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tier_pricing_id: Mapped[int] = mapped_column(
        ForeignKey("tier_pricing.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    min_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    # NULL => unbounded above
    max_quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)

    discount_percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    discount_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    fixed_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    tier_pricing: Mapped["TierPricing"] = relationship("TierPricing", back_populates="tiers")
