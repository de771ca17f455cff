from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from filtersfast.models.tier_pricing import TierPricing, TierPricingTier
from filtersfast.schemas.tier_pricing import TierPricingCreate, TierPricingUpdate
from filtersfast.services.tier_pricing_service import validate_tier_pricing


class TierPricingValidationError(Exception):
    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


def _scope_errors(product_id: Any, sku: Any, category_id: Any) -> list[str]:
    populated = [value for value in (product_id, sku, category_id) if value not in (None, "")]
    if len(populated) > 1:
        return ["Tier pricing scope must be only one of product_id, sku or category_id"]
    return []


def _build_tiers(tiers: Iterable[Any]) -> list[TierPricingTier]:
    return [
        TierPricingTier(
            position=position,
            min_quantity=tier.min_quantity,
            max_quantity=tier.max_quantity,
            discount_percentage=tier.discount_percentage,
            discount_amount=tier.discount_amount,
            fixed_price=tier.fixed_price,
        )
        for position, tier in enumerate(tiers, start=1)
    ]


def _ensure_valid(product_id: Any, sku: Any, category_id: Any, tiers: list[Any]) -> None:
    errors = _scope_errors(product_id, sku, category_id)
    errors.extend(validate_tier_pricing(tiers).errors)
    if errors:
        raise TierPricingValidationError(errors)


def _query():
    return select(TierPricing).options(selectinload(TierPricing.tiers))


def create_tier_pricing(db: Session, data: TierPricingCreate) -> TierPricing:
    _ensure_valid(data.product_id, data.sku, data.category_id, data.tiers)
    obj = TierPricing(
        product_id=data.product_id,
        sku=data.sku,
        category_id=data.category_id,
        tiers=_build_tiers(data.tiers),
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def get_tier_pricing(db: Session, tier_pricing_id: int) -> TierPricing | None:
    return db.execute(_query().where(TierPricing.id == tier_pricing_id)).scalars().first()


def get_tier_pricing_by_product_id(db: Session, product_id: int) -> TierPricing | None:
    stmt = _query().where(TierPricing.product_id == product_id).order_by(TierPricing.id.desc())
    return db.execute(stmt).scalars().first()


def get_tier_pricing_by_sku(db: Session, sku: str) -> TierPricing | None:
    stmt = _query().where(TierPricing.sku == sku).order_by(TierPricing.id.desc())
    return db.execute(stmt).scalars().first()


def list_tier_pricing(
    db: Session,
    skip: int = 0,
    limit: int = 50,
    product_id: int | None = None,
    sku: str | None = None,
) -> list[TierPricing]:
    stmt = _query().order_by(TierPricing.id.desc()).offset(skip).limit(limit)
    if product_id is not None:
        stmt = stmt.where(TierPricing.product_id == product_id)
    if sku:
        stmt = stmt.where(TierPricing.sku == sku)
    return list(db.execute(stmt).scalars().all())


def update_tier_pricing(db: Session, tier_pricing_id: int, data: TierPricingUpdate) -> TierPricing | None:
    obj = get_tier_pricing(db, tier_pricing_id)
    if not obj:
        return None

    patch = data.model_dump(exclude_unset=True, exclude={"tiers"})
    merged = {
        "product_id": patch.get("product_id", obj.product_id),
        "sku": patch.get("sku", obj.sku),
        "category_id": patch.get("category_id", obj.category_id),
    }
    tiers = data.tiers if data.tiers is not None else list(obj.tiers)
    _ensure_valid(merged["product_id"], merged["sku"], merged["category_id"], tiers)

    for k, v in merged.items():
        setattr(obj, k, v)
    if data.tiers is not None:
        obj.tiers = _build_tiers(data.tiers)

    db.commit()
    db.refresh(obj)
    return obj


def delete_tier_pricing(db: Session, tier_pricing_id: int) -> bool:
    obj = db.get(TierPricing, tier_pricing_id)
    if not obj:
        return False

    db.delete(obj)
    db.commit()
    return True
