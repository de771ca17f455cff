from decimal import Decimal

from sqlalchemy import Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from filtersfast.db.base import Base
from filtersfast.models.mixins import TimestampMixin


class OrderDiscount(TimestampMixin, Base):
    """Promo code applied to a whole order. Exactly one of disc_perc / disc_amt is set."""
    __tablename__ = "order_discounts"

    __table_args__ = (
        UniqueConstraint("disc_code", name="uq_order_discounts_code"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    disc_code: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    disc_perc: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    disc_amt: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    disc_from_amt: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    disc_to_amt: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # A = active, I = inactive, U = used
    disc_status: Mapped[str] = mapped_column(String(1), nullable=False, default="A", index=True)
    disc_once_only: Mapped[str] = mapped_column(String(1), nullable=False, default="N")
    # YYYYMMDD
    disc_valid_from: Mapped[str] = mapped_column(String(8), nullable=False)
    disc_valid_to: Mapped[str] = mapped_column(String(8), nullable=False)
