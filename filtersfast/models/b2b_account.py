import enum
from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from filtersfast.db.base import Base
from filtersfast.models.mixins import TimestampMixin


class B2BAccountStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class PaymentTerms(str, enum.Enum):
    NET_15 = "net-15"
    NET_30 = "net-30"
    NET_45 = "net-45"
    NET_60 = "net-60"
    PREPAY = "prepay"


class PricingTier(str, enum.Enum):
    STANDARD = "standard"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    CUSTOM = "custom"


class B2BAccount(TimestampMixin, Base):
    __tablename__ = "b2b_account"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Stored as plain strings; values are members of the enums above.
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=B2BAccountStatus.PENDING.value)
    pricing_tier: Mapped[str] = mapped_column(String(20), nullable=False, default=PricingTier.STANDARD.value)
    payment_terms: Mapped[str] = mapped_column(String(20), nullable=False, default=PaymentTerms.PREPAY.value)

    discount_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    credit_limit: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    credit_used: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    suspension_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
