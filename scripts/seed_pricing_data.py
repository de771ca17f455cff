"""
Seed demo catalog and pricing rules for local development.

Tables seeded:
  - product (filters plus the free gifts they reference)
  - tier_pricing / tier_pricing_tier (volume table for the refrigerator filter)
  - deal / deal_reward_sku (spend-band gift)
  - b2b_account (one approved net-30 account)

Rows are upserted by id, so the script can be re-run safely.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from filtersfast.db.session import SessionLocal
from filtersfast.models.b2b_account import B2BAccount
from filtersfast.models.deal import Deal, DealRewardSku
from filtersfast.models.product import Product
from filtersfast.models.tier_pricing import TierPricing, TierPricingTier


def _upsert_by_id(
    db: Session,
    model: Any,
    row_id: int,
    data: dict[str, Any],
    new_objects: list[Any],
) -> Any:
    obj = db.get(model, row_id)
    if obj:
        for key, value in data.items():
            setattr(obj, key, value)
        return obj
    obj = model(id=row_id, **data)
    new_objects.append(obj)
    return obj


def seed_pricing_data(db: Session) -> None:
    new_objects: list[Any] = []

    products = [
        {"id": 1, "sku": "FF-RF-001", "name": "Refrigerator Water Filter", "product_type": "fridge", "price": "39.99",
         "gift_with_purchase_product_id": 3, "gift_with_purchase_auto_add": True},
        {"id": 2, "sku": "FF-AIR-16X25", "name": "16x25x1 Air Filter", "product_type": "air", "price": "12.99"},
        {"id": 3, "sku": "FF-GIFT-WIPES", "name": "Coil Cleaning Wipes", "product_type": "air", "price": "4.99"},
        {"id": 4, "sku": "FF-GIFT-BOTTLE", "name": "Filtered Water Bottle", "product_type": "water", "price": "14.99"},
    ]
    for row in products:
        row = dict(row)
        row_id = row.pop("id")
        row["price"] = Decimal(row["price"])
        row.setdefault("brand", "FiltersFast")
        _upsert_by_id(db, Product, row_id, row, new_objects)

    _upsert_by_id(
        db,
        TierPricing,
        1,
        {
            "product_id": 1,
            "sku": None,
            "category_id": None,
            "tiers": [
                TierPricingTier(position=1, min_quantity=1, max_quantity=5, discount_percentage=Decimal("0")),
                TierPricingTier(position=2, min_quantity=6, max_quantity=11, discount_percentage=Decimal("5")),
                TierPricingTier(position=3, min_quantity=12, max_quantity=None, discount_percentage=Decimal("10")),
            ],
        },
        new_objects,
    )

    _upsert_by_id(
        db,
        Deal,
        1,
        {
            "description": "Spend $75 or more, get a free water bottle",
            "start_price": Decimal("75"),
            "end_price": Decimal("999999.99"),
            "units": 1,
            "reward_auto_add": True,
            "active": True,
            "reward_skus": [DealRewardSku(sku="FF-GIFT-BOTTLE", quantity=1)],
        },
        new_objects,
    )

    _upsert_by_id(
        db,
        B2BAccount,
        1,
        {
            "company_name": "Acme Property Management",
            "contact_email": "purchasing@acme.example",
            "status": "approved",
            "pricing_tier": "gold",
            "payment_terms": "net-30",
            "discount_percentage": Decimal("15"),
            "credit_limit": Decimal("5000"),
            "credit_used": Decimal("0"),
        },
        new_objects,
    )

    if new_objects:
        db.add_all(new_objects)
    db.commit()


def seed() -> None:
    db = SessionLocal()
    try:
        seed_pricing_data(db)
    finally:
        db.close()


if __name__ == "__main__":
    seed()
