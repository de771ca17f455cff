"""
B2B pricing: account discounts, tier pricing on top, credit/terms gate.

Account discount is applied first and becomes the base price for tier
pricing. The credit gate is a read-then-decide check against a snapshot of
credit_used; callers that must prevent two concurrent orders from jointly
exceeding the limit run it inside a serializable transaction.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional, Union

from filtersfast.models.b2b_account import B2BAccountStatus, PaymentTerms
from filtersfast.services.catalog import PricingCatalog
from filtersfast.services.tier_pricing_service import (
    HUNDRED,
    TierPricingResult,
    calculate_tier_price,
    quantize_money,
    to_decimal,
)

_NET_TERM_DAYS = {
    PaymentTerms.NET_15: 15,
    PaymentTerms.NET_30: 30,
    PaymentTerms.NET_45: 45,
    PaymentTerms.NET_60: 60,
    PaymentTerms.PREPAY: 0,
}


@dataclass(frozen=True)
class OrderGateDecision:
    allowed: bool
    reason: Optional[str] = None


def _enum_value(value: Any) -> str:
    return str(getattr(value, "value", value))


def _status_of(account: Any) -> B2BAccountStatus:
    return B2BAccountStatus(_enum_value(account.status))


def _terms_of(account: Any) -> PaymentTerms:
    return PaymentTerms(_enum_value(account.payment_terms))


def apply_b2b_discount(base_price: Any, account: Any):
    base_price = to_decimal(base_price)
    if _status_of(account) is not B2BAccountStatus.APPROVED:
        return base_price
    discount = to_decimal(account.discount_percentage or 0)
    return quantize_money(base_price * (1 - discount / HUNDRED))


def calculate_b2b_price(
    base_price: Any,
    quantity: int,
    account: Any,
    product_id: Optional[int] = None,
    sku: Optional[str] = None,
    *,
    catalog: PricingCatalog,
) -> TierPricingResult:
    discounted_price = apply_b2b_discount(base_price, account)

    tier_pricing = None
    if product_id:
        tier_pricing = catalog.get_tier_pricing_by_product_id(product_id)
    if tier_pricing is None and sku:
        tier_pricing = catalog.get_tier_pricing_by_sku(sku)

    return calculate_tier_price(discounted_price, quantity, tier_pricing)


def can_place_order(account: Any, order_total: Any) -> OrderGateDecision:
    status = _status_of(account)
    if status is B2BAccountStatus.PENDING:
        return OrderGateDecision(allowed=False, reason="Account pending approval")
    if status is B2BAccountStatus.REJECTED:
        return OrderGateDecision(allowed=False, reason="Account not approved")
    if status is B2BAccountStatus.SUSPENDED:
        reason = "Account suspended"
        suspension_reason = (getattr(account, "suspension_reason", None) or "").strip()
        if suspension_reason:
            reason = f"{reason}: {suspension_reason}"
        return OrderGateDecision(allowed=False, reason=reason)

    if account.credit_limit is None or _terms_of(account) is PaymentTerms.PREPAY:
        return OrderGateDecision(allowed=True)

    credit_available = to_decimal(account.credit_limit) - to_decimal(account.credit_used or 0)
    if to_decimal(order_total) > credit_available:
        return OrderGateDecision(
            allowed=False,
            reason=f"Order exceeds available credit. Available: ${credit_available:.2f}",
        )
    return OrderGateDecision(allowed=True)


def calculate_due_date(
    order_date: Union[date, datetime],
    payment_terms: Union[str, PaymentTerms],
) -> Union[date, datetime]:
    """Invoice due date for the account's terms; prepay is due immediately."""
    terms = PaymentTerms(_enum_value(payment_terms))
    return order_date + timedelta(days=_NET_TERM_DAYS[terms])
