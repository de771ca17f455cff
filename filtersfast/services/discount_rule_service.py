"""
Admin-side constraint enforcement for discount rules and deals.

Validation is fail-fast: the first violated rule raises
DiscountRuleValidationError and nothing is persisted. Each validator takes a
plain field mapping (request payload for creates, stored row merged with the
patch for updates) and returns the normalized field set to persist.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sqlalchemy.orm import Session

from filtersfast.core.config import settings
from filtersfast.crud import deals as deals_crud
from filtersfast.crud import order_discounts as order_discounts_crud
from filtersfast.crud import product_discounts as product_discounts_crud
from filtersfast.models.deal import Deal
from filtersfast.models.order_discount import OrderDiscount
from filtersfast.models.product_discount import ProductDiscount

logger = logging.getLogger(__name__)

DISC_STATUSES = {"A", "I", "U"}
ONCE_ONLY_VALUES = {"Y", "N"}
DISC_TYPES = {"percentage", "amount"}
TARGET_TYPES = {"global", "product", "category", "product_type"}
PRODUCT_TYPES = ("fridge", "water", "air", "humidifier", "pool")

MAX_CODE_LENGTH = 20
MAX_DEAL_PRICE = Decimal("999999.99")
MAX_DEAL_UNITS = 999
MAX_DESCRIPTION_LENGTH = 100
DEFAULT_FROM_AMT = Decimal("0")
DEFAULT_TO_AMT = Decimal("9999.99")

_CODE_PATTERN = re.compile(r"^[A-Z0-9_-]+$")
_FORBIDDEN_CODE_CHARS = re.compile(r"[\s'\"`]")
_DATE_PATTERN = re.compile(r"^\d{8}$")
_SCRIPT_TAG = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+\s*=\s*[\"'][^\"']*[\"']", re.IGNORECASE)
_HTML_TAG = re.compile(r"<[^>]*>")
_JS_SCHEME = re.compile(r"javascript:", re.IGNORECASE)


class DiscountRuleValidationError(Exception):
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def sanitize_text(value: Any) -> str:
    text = str(value or "")
    text = _SCRIPT_TAG.sub("", text)
    text = _EVENT_HANDLER.sub("", text)
    text = _HTML_TAG.sub("", text)
    text = _JS_SCHEME.sub("", text)
    return text.strip()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_decimal(field: str, value: Any, message: str) -> Decimal:
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise DiscountRuleValidationError(field, message)
    if not parsed.is_finite():
        raise DiscountRuleValidationError(field, message)
    return parsed


def normalize_discount_code(value: Any) -> str:
    if _is_blank(value):
        raise DiscountRuleValidationError("disc_code", "Discount code is required")
    code = sanitize_text(value).upper()
    if not code:
        raise DiscountRuleValidationError("disc_code", "Discount code is required")
    if _FORBIDDEN_CODE_CHARS.search(code):
        raise DiscountRuleValidationError(
            "disc_code", "Discount code cannot contain spaces, quotes, or special characters"
        )
    if len(code) > MAX_CODE_LENGTH:
        raise DiscountRuleValidationError("disc_code", "Discount code must be 20 characters or less")
    if not _CODE_PATTERN.match(code):
        raise DiscountRuleValidationError(
            "disc_code", "Discount code can only contain letters, numbers, underscores, and hyphens"
        )
    return code


def _validate_amount_band(from_value: Any, to_value: Any) -> tuple[Decimal, Decimal]:
    from_amt = _as_decimal("disc_from_amt", from_value, "Invalid order amount from value")
    if from_amt < 0:
        raise DiscountRuleValidationError("disc_from_amt", "Invalid order amount from value")
    to_amt = _as_decimal("disc_to_amt", to_value, "Invalid order amount to value")
    if to_amt < 0:
        raise DiscountRuleValidationError("disc_to_amt", "Invalid order amount to value")
    if to_amt < from_amt:
        raise DiscountRuleValidationError(
            "disc_to_amt",
            "Maximum order amount must be greater than or equal to minimum order amount",
        )
    return from_amt, to_amt


def _validate_percentage(value: Any) -> Decimal:
    message = "Discount percentage must be between 0 and 100"
    perc = _as_decimal("disc_perc", value, message)
    if perc <= 0 or perc > 100:
        raise DiscountRuleValidationError("disc_perc", message)
    return perc


def _validate_amount(value: Any) -> Decimal:
    message = "Discount amount must be greater than 0"
    amt = _as_decimal("disc_amt", value, message)
    if amt <= 0:
        raise DiscountRuleValidationError("disc_amt", message)
    return amt


def _validate_date_range(valid_from: Any, valid_to: Any) -> tuple[str, str]:
    valid_from = str(valid_from or "").strip()
    valid_to = str(valid_to or "").strip()
    if not _DATE_PATTERN.match(valid_from):
        raise DiscountRuleValidationError(
            "disc_valid_from", "Invalid valid from date format. Expected YYYYMMDD"
        )
    if not _DATE_PATTERN.match(valid_to):
        raise DiscountRuleValidationError(
            "disc_valid_to", "Invalid valid to date format. Expected YYYYMMDD"
        )
    # Fixed-width zero-padded dates compare correctly as strings.
    if valid_to < valid_from:
        raise DiscountRuleValidationError(
            "disc_valid_to", "Valid to date must be greater than or equal to valid from date"
        )
    return valid_from, valid_to


def _validate_choice(field: str, value: Any, allowed: set[str], message: str) -> str:
    normalized = str(value or "").strip().upper()
    if normalized not in allowed:
        raise DiscountRuleValidationError(field, message)
    return normalized


# ============================================
# ORDER DISCOUNTS
# ============================================

def validate_order_discount(data: dict[str, Any]) -> dict[str, Any]:
    required = (
        "disc_code",
        "disc_from_amt",
        "disc_to_amt",
        "disc_status",
        "disc_once_only",
        "disc_valid_from",
        "disc_valid_to",
    )
    for field in required:
        if _is_blank(data.get(field)):
            raise DiscountRuleValidationError(field, "Missing required fields")

    has_perc = data.get("disc_perc") is not None
    has_amt = data.get("disc_amt") is not None
    if not has_perc and not has_amt:
        raise DiscountRuleValidationError(
            "disc_perc", "Either discount percentage or discount amount must be provided"
        )
    if has_perc and has_amt:
        raise DiscountRuleValidationError(
            "disc_amt", "Cannot provide both discount percentage and discount amount"
        )

    code = normalize_discount_code(data["disc_code"])
    from_amt, to_amt = _validate_amount_band(data["disc_from_amt"], data["disc_to_amt"])

    perc = _validate_percentage(data["disc_perc"]) if has_perc else None
    amt = None
    if has_amt:
        amt = _validate_amount(data["disc_amt"])
        if amt > to_amt:
            raise DiscountRuleValidationError(
                "disc_amt", "Discount amount cannot be greater than maximum order amount"
            )

    status = _validate_choice(
        "disc_status",
        data["disc_status"],
        DISC_STATUSES,
        "Invalid status. Must be A (Active), I (Inactive), or U (Used)",
    )
    once_only = _validate_choice(
        "disc_once_only",
        data["disc_once_only"],
        ONCE_ONLY_VALUES,
        "Invalid once only value. Must be Y (Yes) or N (No)",
    )
    valid_from, valid_to = _validate_date_range(data["disc_valid_from"], data["disc_valid_to"])

    return {
        "disc_code": code,
        "disc_perc": perc,
        "disc_amt": amt,
        "disc_from_amt": from_amt,
        "disc_to_amt": to_amt,
        "disc_status": status,
        "disc_once_only": once_only,
        "disc_valid_from": valid_from,
        "disc_valid_to": valid_to,
    }


def create_order_discount(db: Session, payload: dict[str, Any]) -> OrderDiscount:
    fields = validate_order_discount(payload)
    obj = order_discounts_crud.create_order_discount(db, fields)
    logger.info("order_discount_created id=%s code=%s", obj.id, obj.disc_code)
    return obj


def update_order_discount(db: Session, discount_id: int, patch: dict[str, Any]) -> Optional[OrderDiscount]:
    obj = order_discounts_crud.get_order_discount(db, discount_id)
    if not obj:
        return None
    merged = order_discounts_crud.to_field_dict(obj)
    merged.update(patch)
    fields = validate_order_discount(merged)
    obj = order_discounts_crud.apply_order_discount(db, obj, fields)
    logger.info("order_discount_updated id=%s code=%s", obj.id, obj.disc_code)
    return obj


# ============================================
# PRODUCT DISCOUNTS
# ============================================

def validate_product_discount(data: dict[str, Any]) -> dict[str, Any]:
    code_raw = data.get("disc_code")
    if _is_blank(code_raw):
        raise DiscountRuleValidationError("disc_code", "Discount code is required")

    disc_type = str(data.get("disc_type") or "").strip().lower()
    if disc_type not in DISC_TYPES:
        raise DiscountRuleValidationError(
            "disc_type", 'Discount type must be "percentage" or "amount"'
        )

    target_type = str(data.get("target_type") or "").strip().lower()
    if not target_type:
        raise DiscountRuleValidationError("target_type", "Target type is required")
    if target_type not in TARGET_TYPES:
        raise DiscountRuleValidationError(
            "target_type", "Target type must be one of: global, product, category, product_type"
        )

    if _is_blank(data.get("disc_valid_from")) or _is_blank(data.get("disc_valid_to")):
        raise DiscountRuleValidationError(
            "disc_valid_from", "Valid from and valid to dates are required"
        )

    perc = None
    amt = None
    if disc_type == "percentage":
        if data.get("disc_perc") is None:
            raise DiscountRuleValidationError("disc_perc", "Percentage must be between 0 and 100")
        perc = _validate_percentage(data["disc_perc"])
    else:
        if data.get("disc_amt") is None:
            raise DiscountRuleValidationError("disc_amt", "Amount must be greater than 0")
        amt = _validate_amount(data["disc_amt"])

    target_id = data.get("target_id")
    target_product_type = (str(data.get("target_product_type") or "").strip().lower()) or None
    if target_type in {"product", "category"}:
        if target_id is None or int(target_id) <= 0:
            raise DiscountRuleValidationError(
                "target_id", "Target ID is required for product/category discounts"
            )
    if target_type == "product_type" and not target_product_type:
        raise DiscountRuleValidationError(
            "target_product_type", "Product type is required for product_type discounts"
        )

    code = normalize_discount_code(code_raw)
    valid_from, valid_to = _validate_date_range(data["disc_valid_from"], data["disc_valid_to"])

    from_value = data.get("disc_from_amt")
    to_value = data.get("disc_to_amt")
    from_amt, to_amt = _validate_amount_band(
        DEFAULT_FROM_AMT if from_value is None else from_value,
        DEFAULT_TO_AMT if to_value is None else to_value,
    )

    if target_product_type is not None and target_product_type not in PRODUCT_TYPES:
        raise DiscountRuleValidationError(
            "target_product_type",
            "Invalid product type. Must be one of: " + ", ".join(PRODUCT_TYPES),
        )

    status = _validate_choice(
        "disc_status",
        data.get("disc_status") or "A",
        DISC_STATUSES,
        "Invalid status. Must be A (Active), I (Inactive), or U (Used)",
    )
    once_only = _validate_choice(
        "disc_once_only",
        data.get("disc_once_only") or "N",
        ONCE_ONLY_VALUES,
        "Invalid once only value. Must be Y (Yes) or N (No)",
    )

    notes = data.get("disc_notes")
    allow_on_forms = data.get("disc_allow_on_forms")
    return {
        "disc_code": code,
        "disc_type": disc_type,
        "disc_perc": perc,
        "disc_amt": amt,
        "target_type": target_type,
        "target_id": int(target_id) if target_type in {"product", "category"} else None,
        "target_product_type": target_product_type,
        "disc_from_amt": from_amt,
        "disc_to_amt": to_amt,
        "disc_status": status,
        "disc_valid_from": valid_from,
        "disc_valid_to": valid_to,
        "disc_once_only": once_only,
        "disc_free_shipping": bool(data.get("disc_free_shipping")),
        "disc_multi_by_qty": bool(data.get("disc_multi_by_qty")),
        "disc_compoundable": bool(data.get("disc_compoundable")),
        "disc_allow_on_forms": allow_on_forms is not False,
        "disc_notes": sanitize_text(notes) if notes else None,
    }


def create_product_discount(db: Session, payload: dict[str, Any], created_by: str) -> ProductDiscount:
    fields = validate_product_discount(payload)
    obj = product_discounts_crud.create_product_discount(db, fields, created_by=created_by)
    logger.info("product_discount_created id=%s code=%s by=%s", obj.id, obj.disc_code, created_by)
    return obj


def update_product_discount(db: Session, discount_id: int, patch: dict[str, Any]) -> Optional[ProductDiscount]:
    obj = product_discounts_crud.get_product_discount(db, discount_id)
    if not obj:
        return None
    merged = product_discounts_crud.to_field_dict(obj)
    merged.update(patch)
    fields = validate_product_discount(merged)
    obj = product_discounts_crud.apply_product_discount(db, obj, fields)
    logger.info("product_discount_updated id=%s code=%s", obj.id, obj.disc_code)
    return obj


# ============================================
# DEALS
# ============================================

def _validate_deal_price(field: str, value: Any, label: str) -> Decimal:
    message = f"{label} must be between 0 and {MAX_DEAL_PRICE}"
    if value is None:
        raise DiscountRuleValidationError(field, message)
    price = _as_decimal(field, value, message)
    if price < 0 or price > MAX_DEAL_PRICE:
        raise DiscountRuleValidationError(field, message)
    return price


def _validate_reward_skus(values: Any) -> list[dict[str, Any]]:
    values = list(values or [])
    if len(values) > settings.DEAL_MAX_REWARD_SKUS:
        raise DiscountRuleValidationError(
            "reward_skus", f"A deal can have at most {settings.DEAL_MAX_REWARD_SKUS} reward SKUs"
        )
    rewards = []
    for position, value in enumerate(values, start=1):
        entry = value if isinstance(value, dict) else value.model_dump()
        sku = sanitize_text(entry.get("sku"))
        if not sku or len(sku) > 64:
            raise DiscountRuleValidationError("reward_skus", f"Reward {position}: SKU is required")
        quantity = entry.get("quantity")
        quantity = 1 if quantity is None else int(quantity)
        if quantity < 1 or quantity > 100:
            raise DiscountRuleValidationError(
                "reward_skus", f"Reward {position}: quantity must be between 1 and 100"
            )
        price_override = entry.get("price_override")
        if price_override is not None:
            price_override = _validate_deal_price(
                "reward_skus", price_override, f"Reward {position}: price override"
            )
        rewards.append({"sku": sku, "quantity": quantity, "price_override": price_override})
    return rewards


def _naive_utc(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def validate_deal(data: dict[str, Any]) -> dict[str, Any]:
    description = sanitize_text(data.get("description"))
    if not description or len(description) > MAX_DESCRIPTION_LENGTH:
        raise DiscountRuleValidationError(
            "description", f"Description must be between 1 and {MAX_DESCRIPTION_LENGTH} characters"
        )

    start_price = _validate_deal_price("start_price", data.get("start_price"), "Start price")
    end_price = _validate_deal_price("end_price", data.get("end_price"), "End price")

    units = data.get("units")
    units = 0 if units is None else int(units)
    if units < 0 or units > MAX_DEAL_UNITS:
        raise DiscountRuleValidationError("units", f"Units must be between 0 and {MAX_DEAL_UNITS}")

    if end_price < start_price:
        raise DiscountRuleValidationError(
            "end_price", "End price must be greater than or equal to start price"
        )

    # Stored windows are naive UTC.
    valid_from = _naive_utc(data.get("valid_from"))
    valid_to = _naive_utc(data.get("valid_to"))
    if valid_from is not None and valid_to is not None and valid_to < valid_from:
        raise DiscountRuleValidationError("valid_to", "End date must be after start date")

    active = data.get("active")
    return {
        "description": description,
        "start_price": start_price,
        "end_price": end_price,
        "units": units,
        "active": True if active is None else bool(active),
        "reward_auto_add": bool(data.get("reward_auto_add")),
        "valid_from": valid_from,
        "valid_to": valid_to,
        "reward_skus": _validate_reward_skus(data.get("reward_skus")),
    }


def create_deal(db: Session, payload: dict[str, Any]) -> Deal:
    fields = validate_deal(payload)
    obj = deals_crud.create_deal(db, fields)
    logger.info("deal_created id=%s band=%s-%s", obj.id, obj.start_price, obj.end_price)
    return obj


def update_deal(db: Session, deal_id: int, patch: dict[str, Any]) -> Optional[Deal]:
    obj = deals_crud.get_deal(db, deal_id)
    if not obj:
        return None
    merged = deals_crud.to_field_dict(obj)
    merged.update(patch)
    fields = validate_deal(merged)
    obj = deals_crud.apply_deal(db, obj, fields)
    logger.info("deal_updated id=%s band=%s-%s", obj.id, obj.start_price, obj.end_price)
    return obj
