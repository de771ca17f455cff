from __future__ import annotations

from decimal import Decimal

import pytest

from filtersfast.core.config import settings
from filtersfast.crud.errors import DuplicateError
from filtersfast.services.discount_rule_service import (
    DiscountRuleValidationError,
    create_deal,
    create_order_discount,
    create_product_discount,
    sanitize_text,
    update_deal,
    update_order_discount,
    update_product_discount,
    validate_deal,
    validate_order_discount,
    validate_product_discount,
)


def _order_payload(**overrides):
    payload = {
        "disc_code": "save10",
        "disc_perc": Decimal("10"),
        "disc_amt": None,
        "disc_from_amt": Decimal("0"),
        "disc_to_amt": Decimal("500"),
        "disc_status": "a",
        "disc_once_only": "n",
        "disc_valid_from": "20260101",
        "disc_valid_to": "20261231",
    }
    payload.update(overrides)
    return payload


def _product_payload(**overrides):
    payload = {
        "disc_code": "fridge15",
        "disc_type": "percentage",
        "disc_perc": Decimal("15"),
        "target_type": "product_type",
        "target_product_type": "fridge",
        "disc_valid_from": "20260101",
        "disc_valid_to": "20261231",
    }
    payload.update(overrides)
    return payload


def _deal_payload(**overrides):
    payload = {
        "description": "Spend $50, get a free filter",
        "start_price": Decimal("50"),
        "end_price": Decimal("100"),
        "units": 1,
        "reward_auto_add": True,
        "reward_skus": [{"sku": "BONUS-1", "quantity": 1, "price_override": None}],
    }
    payload.update(overrides)
    return payload


def _error(fn, payload) -> DiscountRuleValidationError:
    with pytest.raises(DiscountRuleValidationError) as exc_info:
        fn(payload)
    return exc_info.value


def test_order_discount_is_normalized():
    fields = validate_order_discount(_order_payload())

    assert fields["disc_code"] == "SAVE10"
    assert fields["disc_status"] == "A"
    assert fields["disc_once_only"] == "N"
    assert fields["disc_perc"] == Decimal("10")
    assert fields["disc_amt"] is None


@pytest.mark.parametrize(
    "overrides, field, message",
    [
        ({"disc_valid_to": None}, "disc_valid_to", "Missing required fields"),
        ({"disc_perc": None}, "disc_perc", "Either discount percentage or discount amount must be provided"),
        ({"disc_amt": Decimal("5")}, "disc_amt", "Cannot provide both discount percentage and discount amount"),
        ({"disc_code": "SAVE 10"}, "disc_code", "Discount code cannot contain spaces, quotes, or special characters"),
        ({"disc_code": "A" * 21}, "disc_code", "Discount code must be 20 characters or less"),
        ({"disc_code": "SAVE$10"}, "disc_code", "Discount code can only contain letters, numbers, underscores, and hyphens"),
        ({"disc_from_amt": Decimal("-1")}, "disc_from_amt", "Invalid order amount from value"),
        (
            {"disc_from_amt": Decimal("600")},
            "disc_to_amt",
            "Maximum order amount must be greater than or equal to minimum order amount",
        ),
        ({"disc_perc": Decimal("0")}, "disc_perc", "Discount percentage must be between 0 and 100"),
        ({"disc_perc": Decimal("100.01")}, "disc_perc", "Discount percentage must be between 0 and 100"),
        ({"disc_status": "X"}, "disc_status", "Invalid status. Must be A (Active), I (Inactive), or U (Used)"),
        ({"disc_once_only": "maybe"}, "disc_once_only", "Invalid once only value. Must be Y (Yes) or N (No)"),
        ({"disc_valid_from": "2026-01-01"}, "disc_valid_from", "Invalid valid from date format. Expected YYYYMMDD"),
        (
            {"disc_valid_from": "20270101"},
            "disc_valid_to",
            "Valid to date must be greater than or equal to valid from date",
        ),
    ],
)
def test_order_discount_rejections(overrides, field, message):
    error = _error(validate_order_discount, _order_payload(**overrides))

    assert error.field == field
    assert error.message == message


def test_order_discount_amount_cannot_exceed_band():
    payload = _order_payload(disc_perc=None, disc_amt=Decimal("600"))

    error = _error(validate_order_discount, payload)

    assert error.message == "Discount amount cannot be greater than maximum order amount"


def test_order_discount_zero_lower_bound_is_not_missing():
    fields = validate_order_discount(_order_payload(disc_from_amt=Decimal("0")))

    assert fields["disc_from_amt"] == Decimal("0")


def test_product_discount_defaults():
    fields = validate_product_discount(_product_payload())

    assert fields["disc_code"] == "FRIDGE15"
    assert fields["disc_from_amt"] == Decimal("0")
    assert fields["disc_to_amt"] == Decimal("9999.99")
    assert fields["disc_status"] == "A"
    assert fields["disc_once_only"] == "N"
    assert fields["disc_allow_on_forms"] is True
    assert fields["target_id"] is None


def test_product_discount_keeps_only_the_value_matching_its_type():
    fields = validate_product_discount(
        _product_payload(disc_type="amount", disc_amt=Decimal("5"), disc_perc=Decimal("15"))
    )

    assert fields["disc_amt"] == Decimal("5")
    assert fields["disc_perc"] is None


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"disc_code": ""}, "Discount code is required"),
        ({"disc_type": "bogo"}, 'Discount type must be "percentage" or "amount"'),
        ({"target_type": None}, "Target type is required"),
        ({"target_type": "brand"}, "Target type must be one of: global, product, category, product_type"),
        ({"disc_perc": Decimal("0")}, "Discount percentage must be between 0 and 100"),
        ({"disc_type": "amount", "disc_amt": None}, "Amount must be greater than 0"),
        ({"target_type": "product", "target_id": None}, "Target ID is required for product/category discounts"),
        ({"target_type": "category", "target_id": 0}, "Target ID is required for product/category discounts"),
        ({"target_product_type": None}, "Product type is required for product_type discounts"),
        (
            {"target_product_type": "toaster"},
            "Invalid product type. Must be one of: fridge, water, air, humidifier, pool",
        ),
        ({"disc_valid_to": None}, "Valid from and valid to dates are required"),
    ],
)
def test_product_discount_rejections(overrides, message):
    assert _error(validate_product_discount, _product_payload(**overrides)).message == message


def test_deal_description_is_sanitized():
    fields = validate_deal(_deal_payload(description="<b>Free</b> filter<script>alert(1)</script>"))

    assert fields["description"] == "Free filter"


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"description": "<p></p>"}, "description"),
        ({"description": "x" * 101}, "description"),
        ({"start_price": Decimal("-1")}, "start_price"),
        ({"end_price": Decimal("1000000")}, "end_price"),
        ({"units": 1000}, "units"),
        ({"start_price": Decimal("80"), "end_price": Decimal("60")}, "end_price"),
        ({"reward_skus": [{"sku": "A", "quantity": 0}]}, "reward_skus"),
        ({"reward_skus": [{"sku": "A", "quantity": 1, "price_override": Decimal("-1")}]}, "reward_skus"),
        ({"reward_skus": [{"sku": " "}]}, "reward_skus"),
    ],
)
def test_deal_rejections(overrides, field):
    assert _error(validate_deal, _deal_payload(**overrides)).field == field


def test_deal_reward_sku_limit(monkeypatch):
    monkeypatch.setattr(settings, "DEAL_MAX_REWARD_SKUS", 2)
    skus = [{"sku": f"S{i}"} for i in range(3)]

    error = _error(validate_deal, _deal_payload(reward_skus=skus))

    assert error.message == "A deal can have at most 2 reward SKUs"


def test_sanitize_text_strips_markup():
    assert sanitize_text('<a href="#" onclick="x()">Hi</a> javascript:go') == "Hi go"


def test_duplicate_order_discount_code_is_rejected(db_session):
    create_order_discount(db_session, _order_payload())

    with pytest.raises(DuplicateError):
        create_order_discount(db_session, _order_payload(disc_code="SAVE10"))


def test_order_discount_update_merges_and_revalidates(db_session):
    obj = create_order_discount(db_session, _order_payload())

    updated = update_order_discount(db_session, obj.id, {"disc_status": "I"})
    assert updated.disc_status == "I"
    assert updated.disc_perc == Decimal("10")

    with pytest.raises(DiscountRuleValidationError):
        update_order_discount(db_session, obj.id, {"disc_amt": Decimal("5")})

    switched = update_order_discount(db_session, obj.id, {"disc_perc": None, "disc_amt": Decimal("5")})
    assert switched.disc_perc is None
    assert switched.disc_amt == Decimal("5")


def test_update_of_missing_rows_returns_none(db_session):
    assert update_order_discount(db_session, 404, {"disc_status": "I"}) is None
    assert update_product_discount(db_session, 404, {"disc_status": "I"}) is None
    assert update_deal(db_session, 404, {"units": 2}) is None


def test_product_discount_create_records_author(db_session):
    obj = create_product_discount(db_session, _product_payload(), created_by="admin@filtersfast.com")

    assert obj.created_by == "admin@filtersfast.com"
    assert obj.target_product_type == "fridge"


def test_deal_update_replaces_reward_skus(db_session):
    deal = create_deal(db_session, _deal_payload())

    updated = update_deal(
        db_session,
        deal.id,
        {"reward_skus": [{"sku": "BONUS-2", "quantity": 3, "price_override": None}]},
    )

    assert [(r.sku, r.quantity) for r in updated.reward_skus] == [("BONUS-2", 3)]
    assert updated.description == "Spend $50, get a free filter"
