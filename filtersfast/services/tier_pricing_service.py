"""
Tier (volume) pricing.

This module handles:
1. Pricing-method resolution for a tier (fixed price / amount off / percent off)
2. Tier selection and unit price calculation for a quantity
3. Price-break tables and MOQ incentives for display
4. Batch validation of proposed tier tables

Tier objects are duck-typed: anything exposing min_quantity, max_quantity,
fixed_price, discount_amount and discount_percentage works (ORM rows,
request schemas, TierSnapshot).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional, Sequence, Union

from filtersfast.core.flow_logging import flow_info

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


# ============================================
# PRICING METHODS
# ============================================

@dataclass(frozen=True)
class FixedPrice:
    price: Decimal

    def apply(self, base_price: Decimal) -> Decimal:
        return self.price


@dataclass(frozen=True)
class AmountOff:
    amount: Decimal

    def apply(self, base_price: Decimal) -> Decimal:
        return max(ZERO, base_price - self.amount)


@dataclass(frozen=True)
class PercentOff:
    percentage: Decimal

    def apply(self, base_price: Decimal) -> Decimal:
        return base_price * (1 - self.percentage / HUNDRED)


PricingMethod = Union[FixedPrice, AmountOff, PercentOff]


def pricing_method_for(tier: Any) -> Optional[PricingMethod]:
    """
    Resolve the single pricing method of a tier.

    Precedence when several fields are populated:
    fixed_price, then discount_amount, then discount_percentage.
    """
    fixed_price = getattr(tier, "fixed_price", None)
    if fixed_price is not None:
        return FixedPrice(to_decimal(fixed_price))
    discount_amount = getattr(tier, "discount_amount", None)
    if discount_amount is not None:
        return AmountOff(to_decimal(discount_amount))
    discount_percentage = getattr(tier, "discount_percentage", None)
    if discount_percentage is not None:
        return PercentOff(to_decimal(discount_percentage))
    return None


# ============================================
# RESULTS
# ============================================

@dataclass(frozen=True)
class TierSnapshot:
    """Detached copy of the tier that priced a line."""
    min_quantity: int
    max_quantity: Optional[int] = None
    discount_percentage: Optional[Decimal] = None
    discount_amount: Optional[Decimal] = None
    fixed_price: Optional[Decimal] = None

    @classmethod
    def from_tier(cls, tier: Any) -> "TierSnapshot":
        def _opt(value):
            return None if value is None else to_decimal(value)

        return cls(
            min_quantity=int(tier.min_quantity),
            max_quantity=None if tier.max_quantity is None else int(tier.max_quantity),
            discount_percentage=_opt(getattr(tier, "discount_percentage", None)),
            discount_amount=_opt(getattr(tier, "discount_amount", None)),
            fixed_price=_opt(getattr(tier, "fixed_price", None)),
        )


@dataclass(frozen=True)
class TierPricingResult:
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    tier_applied: Optional[TierSnapshot]
    savings: Decimal
    savings_percentage: Decimal


@dataclass(frozen=True)
class TierValidationResult:
    valid: bool
    errors: list[str]


def _tiers_of(tier_pricing: Any) -> Sequence[Any]:
    if tier_pricing is None:
        return ()
    if isinstance(tier_pricing, (list, tuple)):
        return tier_pricing
    return getattr(tier_pricing, "tiers", None) or ()


def _tier_matches(tier: Any, quantity: int) -> bool:
    if quantity < tier.min_quantity:
        return False
    return tier.max_quantity is None or quantity <= tier.max_quantity


def _unpriced_result(base_price: Decimal, quantity: int) -> TierPricingResult:
    return TierPricingResult(
        quantity=quantity,
        unit_price=base_price,
        subtotal=base_price * quantity,
        tier_applied=None,
        savings=ZERO,
        savings_percentage=ZERO,
    )


# ============================================
# TIER RESOLUTION
# ============================================

def select_tier(tiers: Iterable[Any], quantity: int) -> Optional[Any]:
    """Highest-min_quantity tier whose range contains quantity (not necessarily the cheapest)."""
    matches = [tier for tier in tiers if _tier_matches(tier, quantity)]
    if not matches:
        return None
    return max(matches, key=lambda tier: tier.min_quantity)


def calculate_tier_price(
    base_price: Any,
    quantity: int,
    tier_pricing: Any = None,
) -> TierPricingResult:
    base_price = to_decimal(base_price)
    tier = select_tier(_tiers_of(tier_pricing), quantity)
    if tier is None:
        return _unpriced_result(base_price, quantity)

    method = pricing_method_for(tier)
    if method is None:
        # Malformed tier: the validator reports it, pricing falls through.
        unit_price = base_price
    else:
        unit_price = quantize_money(method.apply(base_price))

    subtotal = unit_price * quantity
    regular_subtotal = base_price * quantity
    # A fixed price above the base price is honored but never reported as negative savings.
    savings = max(ZERO, regular_subtotal - subtotal)
    if regular_subtotal > 0:
        savings_percentage = quantize_money(savings / regular_subtotal * HUNDRED)
    else:
        savings_percentage = ZERO

    flow_info(
        logger,
        "tier_price_applied quantity=%s min_quantity=%s base=%s unit=%s",
        quantity,
        tier.min_quantity,
        base_price,
        unit_price,
        category="pricing",
    )
    return TierPricingResult(
        quantity=quantity,
        unit_price=unit_price,
        subtotal=subtotal,
        tier_applied=TierSnapshot.from_tier(tier),
        savings=savings,
        savings_percentage=savings_percentage,
    )


def get_tier_price_breaks(
    base_price: Any,
    tier_pricing: Any = None,
    max_quantity: int = 100,
) -> list[dict]:
    base_price = to_decimal(base_price)
    tiers = _tiers_of(tier_pricing)
    if not tiers:
        return [{"quantity": 1, "unit_price": base_price, "savings": ZERO}]

    breaks = []
    for tier in tiers:
        if tier.min_quantity > max_quantity:
            continue
        result = calculate_tier_price(base_price, tier.min_quantity, tiers)
        breaks.append(
            {
                "quantity": tier.min_quantity,
                "unit_price": result.unit_price,
                "savings": result.savings,
            }
        )

    breaks.sort(key=lambda item: item["quantity"])
    if not breaks or breaks[0]["quantity"] > 1:
        breaks.insert(0, {"quantity": 1, "unit_price": base_price, "savings": ZERO})
    return breaks


def format_tier_pricing(result: TierPricingResult) -> dict:
    price_text = f"${result.unit_price:.2f}"

    savings_text = None
    if result.savings > 0:
        savings_text = f"Save ${result.savings:.2f} ({result.savings_percentage:.0f}%)"

    tier_text = None
    if result.tier_applied is not None:
        low = result.tier_applied.min_quantity
        high = result.tier_applied.max_quantity
        tier_text = f"Buy {low}-{high}" if high is not None else f"Buy {low}+"

    return {"price_text": price_text, "savings_text": savings_text, "tier_text": tier_text}


def get_moq_incentive(
    base_price: Any,
    quantity: int,
    moq: int,
    tier_pricing: Any = None,
) -> Optional[dict]:
    """Nudge toward the minimum order quantity when reaching it saves money."""
    if quantity >= moq:
        return None

    current = calculate_tier_price(base_price, quantity, tier_pricing)
    at_moq = calculate_tier_price(base_price, moq, tier_pricing)
    potential_savings = at_moq.savings - current.savings
    if potential_savings <= 0:
        return None

    additional = moq - quantity
    return {
        "should_order": moq,
        "savings": potential_savings,
        "message": f"Order {additional} more to save ${potential_savings:.2f}!",
    }


# ============================================
# VALIDATION
# ============================================

def _effective_max(tier: Any) -> float:
    return float("inf") if tier.max_quantity is None else tier.max_quantity


def _ranges_overlap(first: Any, second: Any) -> bool:
    return (
        second.min_quantity <= first.min_quantity <= _effective_max(second)
        or first.min_quantity <= second.min_quantity <= _effective_max(first)
    )


def validate_tier_pricing(tiers: Optional[Sequence[Any]]) -> TierValidationResult:
    """Collect every problem in a proposed tier table; positions are 1-indexed."""
    errors: list[str] = []

    if not tiers:
        errors.append("At least one tier is required")
        return TierValidationResult(valid=False, errors=errors)

    for i, tier in enumerate(tiers):
        for j in range(i + 1, len(tiers)):
            if _ranges_overlap(tier, tiers[j]):
                errors.append(f"Tiers {i + 1} and {j + 1} have overlapping quantity ranges")

        if pricing_method_for(tier) is None:
            errors.append(
                f"Tier {i + 1} must have a pricing method "
                "(fixed_price, discount_amount, or discount_percentage)"
            )

        if tier.max_quantity is not None and tier.min_quantity >= tier.max_quantity:
            errors.append(f"Tier {i + 1}: min_quantity must be less than max_quantity")

    return TierValidationResult(valid=not errors, errors=errors)
