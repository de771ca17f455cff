from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from filtersfast.db.base import Base
from filtersfast.models.mixins import AuditMixin


class ProductDiscount(AuditMixin, Base):
    """
    Discount applied to specific products, categories or product types.
    Order discounts apply to the whole order; these apply per line.
    """
    __tablename__ = "product_discounts"

    __table_args__ = (
        UniqueConstraint("disc_code", name="uq_product_discounts_code"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    disc_code: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    disc_type: Mapped[str] = mapped_column(String(20), nullable=False)
    disc_perc: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    disc_amt: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    # global | product | category | product_type
    target_type: Mapped[str] = mapped_column(String(20), nullable=False, default="global", index=True)
    target_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_product_type: Mapped[str | None] = mapped_column(String(20), nullable=True)

    disc_from_amt: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    disc_to_amt: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("9999.99"))
    disc_status: Mapped[str] = mapped_column(String(1), nullable=False, default="A", index=True)
    disc_valid_from: Mapped[str] = mapped_column(String(8), nullable=False)
    disc_valid_to: Mapped[str] = mapped_column(String(8), nullable=False)
    disc_once_only: Mapped[str] = mapped_column(String(1), nullable=False, default="N")

    disc_free_shipping: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    disc_multi_by_qty: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    disc_compoundable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    disc_allow_on_forms: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    disc_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
