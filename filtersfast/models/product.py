from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from filtersfast.db.base import Base
from filtersfast.models.mixins import TimestampMixin


class Product(TimestampMixin, Base):
    """
    Catalog product as seen by the pricing core (read-only here).

    gift_with_purchase_product_id is a plain integer on purpose: a reference to
    a product that no longer exists is read as "no reward", never as an error.
    """
    __tablename__ = "product"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    sku: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    brand: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    product_type: Mapped[str] = mapped_column(String(40), nullable=False, default="water")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    primary_image: Mapped[str | None] = mapped_column(String(500), nullable=True)

    gift_with_purchase_product_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gift_with_purchase_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    gift_with_purchase_auto_add: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
