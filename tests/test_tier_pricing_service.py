from __future__ import annotations

from decimal import Decimal

from filtersfast.services.tier_pricing_service import (
    AmountOff,
    FixedPrice,
    PercentOff,
    TierSnapshot,
    calculate_tier_price,
    format_tier_pricing,
    get_moq_incentive,
    get_tier_price_breaks,
    pricing_method_for,
    validate_tier_pricing,
)


def _tier(min_quantity, max_quantity=None, **pricing):
    return TierSnapshot(
        min_quantity=min_quantity,
        max_quantity=max_quantity,
        **{k: Decimal(str(v)) for k, v in pricing.items()},
    )


def _volume_table():
    return [
        _tier(1, 11, fixed_price=10),
        _tier(12, 23, discount_percentage=10),
        _tier(24, fixed_price="8.50"),
    ]


def test_highest_matching_minimum_tier_is_selected():
    result = calculate_tier_price(Decimal("10"), 30, _volume_table())

    assert result.unit_price == Decimal("8.50")
    assert result.tier_applied.min_quantity == 24
    assert result.subtotal == Decimal("255.00")
    assert result.savings == Decimal("45.00")
    assert result.savings_percentage == Decimal("15.00")


def test_overlapping_tiers_still_resolve_to_highest_minimum():
    tiers = [_tier(1, discount_percentage=50), _tier(10, 20, discount_amount=1)]

    result = calculate_tier_price(Decimal("10"), 15, tiers)

    assert result.tier_applied.min_quantity == 10
    assert result.unit_price == Decimal("9.00")


def test_no_matching_tier_returns_base_price():
    tiers = [_tier(12, 23, discount_percentage=10), _tier(24, fixed_price="8.50")]

    result = calculate_tier_price(Decimal("10"), 5, tiers)

    assert result.unit_price == Decimal("10")
    assert result.tier_applied is None
    assert result.savings == Decimal("0")
    assert result.savings_percentage == Decimal("0")


def test_no_tier_pricing_returns_base_price():
    result = calculate_tier_price("19.99", 3)

    assert result.unit_price == Decimal("19.99")
    assert result.subtotal == Decimal("59.97")
    assert result.tier_applied is None


def test_pricing_method_precedence():
    tier = _tier(1, fixed_price=5, discount_amount=2, discount_percentage=50)
    assert pricing_method_for(tier) == FixedPrice(Decimal("5"))

    tier = _tier(1, discount_amount=2, discount_percentage=50)
    assert pricing_method_for(tier) == AmountOff(Decimal("2"))

    tier = _tier(1, discount_percentage=50)
    assert pricing_method_for(tier) == PercentOff(Decimal("50"))

    assert pricing_method_for(_tier(1)) is None


def test_amount_off_is_floored_at_zero():
    result = calculate_tier_price(Decimal("3"), 2, [_tier(1, discount_amount=5)])

    assert result.unit_price == Decimal("0.00")
    assert result.savings == Decimal("6")


def test_percentage_result_is_rounded_to_cents():
    result = calculate_tier_price(Decimal("9.99"), 1, [_tier(1, discount_percentage=15)])

    # 9.99 * 0.85 = 8.4915
    assert result.unit_price == Decimal("8.49")


def test_tier_without_pricing_method_keeps_base_price():
    result = calculate_tier_price(Decimal("10"), 5, [_tier(1)])

    assert result.unit_price == Decimal("10")
    assert result.savings == Decimal("0")


def test_fixed_price_above_base_never_reports_negative_savings():
    result = calculate_tier_price(Decimal("10"), 2, [_tier(1, fixed_price=12)])

    assert result.unit_price == Decimal("12")
    assert result.savings == Decimal("0")
    assert result.savings_percentage == Decimal("0")


def test_zero_base_price_has_zero_savings_percentage():
    result = calculate_tier_price(Decimal("0"), 4, [_tier(1, discount_percentage=10)])

    assert result.savings_percentage == Decimal("0")


def test_price_breaks_include_leading_single_unit_break():
    breaks = get_tier_price_breaks(Decimal("10"), [_tier(24, fixed_price="8.50"), _tier(12, 23, discount_percentage=10)])

    assert [b["quantity"] for b in breaks] == [1, 12, 24]
    assert breaks[0]["unit_price"] == Decimal("10")
    assert breaks[1]["unit_price"] == Decimal("9.00")
    assert breaks[2]["unit_price"] == Decimal("8.50")


def test_price_breaks_skip_tiers_beyond_max_quantity():
    breaks = get_tier_price_breaks(Decimal("10"), _volume_table(), max_quantity=20)

    assert [b["quantity"] for b in breaks] == [1, 12]


def test_price_breaks_without_tiers():
    assert get_tier_price_breaks(Decimal("4")) == [
        {"quantity": 1, "unit_price": Decimal("4"), "savings": Decimal("0")}
    ]


def test_format_tier_pricing_texts():
    result = calculate_tier_price(Decimal("10"), 30, _volume_table())
    display = format_tier_pricing(result)

    assert display == {
        "price_text": "$8.50",
        "savings_text": "Save $45.00 (15%)",
        "tier_text": "Buy 24+",
    }

    bounded = format_tier_pricing(calculate_tier_price(Decimal("10"), 12, _volume_table()))
    assert bounded["tier_text"] == "Buy 12-23"

    plain = format_tier_pricing(calculate_tier_price(Decimal("10"), 1))
    assert plain["savings_text"] is None
    assert plain["tier_text"] is None


def test_moq_incentive():
    incentive = get_moq_incentive(Decimal("10"), 10, 12, _volume_table())

    assert incentive["should_order"] == 12
    assert incentive["savings"] == Decimal("12.00")
    assert incentive["message"] == "Order 2 more to save $12.00!"

    assert get_moq_incentive(Decimal("10"), 12, 12, _volume_table()) is None
    assert get_moq_incentive(Decimal("10"), 2, 5, _volume_table()) is None


def test_validator_requires_at_least_one_tier():
    result = validate_tier_pricing([])

    assert result.valid is False
    assert result.errors == ["At least one tier is required"]


def test_validator_flags_overlap():
    result = validate_tier_pricing(
        [_tier(1, 10, discount_percentage=5), _tier(5, 15, discount_percentage=10)]
    )

    assert result.valid is False
    assert "Tiers 1 and 2 have overlapping quantity ranges" in result.errors


def test_validator_flags_unbounded_overlap_and_duplicates():
    result = validate_tier_pricing(
        [_tier(1, discount_percentage=5), _tier(50, 60, discount_percentage=10), _tier(50, 60, fixed_price=1)]
    )

    assert "Tiers 1 and 2 have overlapping quantity ranges" in result.errors
    assert "Tiers 1 and 3 have overlapping quantity ranges" in result.errors
    assert "Tiers 2 and 3 have overlapping quantity ranges" in result.errors


def test_validator_flags_missing_pricing_method():
    result = validate_tier_pricing([_tier(1, 9, fixed_price=5), _tier(10)])

    assert result.errors == [
        "Tier 2 must have a pricing method (fixed_price, discount_amount, or discount_percentage)"
    ]


def test_validator_flags_inverted_range():
    result = validate_tier_pricing([_tier(10, 10, discount_amount=1)])

    assert result.errors == ["Tier 1: min_quantity must be less than max_quantity"]


def test_validator_accepts_contiguous_table():
    result = validate_tier_pricing(_volume_table())

    assert result.valid is True
    assert result.errors == []


def test_validator_is_idempotent():
    tiers = [_tier(1, 10), _tier(5, 15, discount_percentage=10), _tier(20, 20, fixed_price=1)]

    first = validate_tier_pricing(tiers)
    second = validate_tier_pricing(tiers)

    assert first == second
    assert len(first.errors) == 3
