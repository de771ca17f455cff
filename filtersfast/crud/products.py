from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from filtersfast.models.product import Product


def _parse_product_id(product_id: str | int | None) -> int | None:
    if product_id is None or isinstance(product_id, bool):
        return None
    if isinstance(product_id, int):
        return product_id
    text = str(product_id).strip()
    if not text.isdigit():
        return None
    return int(text)


def get_product_by_id(db: Session, product_id: str | int | None) -> Product | None:
    parsed = _parse_product_id(product_id)
    if parsed is None:
        return None
    return db.get(Product, parsed)


def get_product_by_sku(db: Session, sku: str | None) -> Product | None:
    sku = (sku or "").strip()
    if not sku:
        return None
    stmt = select(Product).where(Product.sku == sku)
    return db.execute(stmt).scalars().first()
