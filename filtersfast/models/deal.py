from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filtersfast.db.base import Base
from filtersfast.models.mixins import TimestampMixin


class Deal(TimestampMixin, Base):
    """
    Order-level gift-with-purchase rule.

    The deal activates when the cart subtotal falls inside the inclusive
    [start_price, end_price] band. Legacy column names are kept on the table.
    """
    __tablename__ = "deal"

    id: Mapped[int] = mapped_column("iddeal", primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column("dealdiscription", String(100), nullable=False)
    start_price: Mapped[Decimal] = mapped_column("startprice", Numeric(12, 2), nullable=False, index=True)
    end_price: Mapped[Decimal] = mapped_column("endprice", Numeric(12, 2), nullable=False)
    units: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    reward_auto_add: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    valid_from: Mapped[datetime | None] = mapped_column("validFrom", DateTime, nullable=True)
    valid_to: Mapped[datetime | None] = mapped_column("validTo", DateTime, nullable=True)

    reward_skus: Mapped[list["DealRewardSku"]] = relationship(
        "DealRewardSku",
        back_populates="deal",
        cascade="all, delete-orphan",
        order_by="DealRewardSku.id",
    )


class DealRewardSku(Base):
    __tablename__ = "deal_reward_sku"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    deal_id: Mapped[int] = mapped_column(
        ForeignKey("deal.iddeal", ondelete="CASCADE"), nullable=False, index=True
    )
    sku: Mapped[str] = mapped_column(String(64), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # NULL => reward is free
    price_override: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    deal: Mapped["Deal"] = relationship("Deal", back_populates="reward_skus")
