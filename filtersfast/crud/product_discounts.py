from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from filtersfast.crud.errors import DuplicateError
from filtersfast.models.product_discount import ProductDiscount

_FIELDS = (
    "disc_code",
    "disc_type",
    "disc_perc",
    "disc_amt",
    "target_type",
    "target_id",
    "target_product_type",
    "disc_from_amt",
    "disc_to_amt",
    "disc_status",
    "disc_valid_from",
    "disc_valid_to",
    "disc_once_only",
    "disc_free_shipping",
    "disc_multi_by_qty",
    "disc_compoundable",
    "disc_allow_on_forms",
    "disc_notes",
)

_SORT_COLUMNS = {
    "id": ProductDiscount.id,
    "disc_code": ProductDiscount.disc_code,
    "disc_type": ProductDiscount.disc_type,
    "target_type": ProductDiscount.target_type,
    "disc_valid_from": ProductDiscount.disc_valid_from,
    "disc_valid_to": ProductDiscount.disc_valid_to,
    "created_at": ProductDiscount.created_at,
}

TARGET_TYPES = ("global", "product", "category", "product_type")


def _commit(db: Session, code: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError(f"Discount code {code} already exists") from e


def create_product_discount(db: Session, fields: dict[str, Any], created_by: str) -> ProductDiscount:
    obj = ProductDiscount(**fields, created_by=created_by)
    db.add(obj)
    _commit(db, fields["disc_code"])
    db.refresh(obj)
    return obj


def get_product_discount(db: Session, discount_id: int) -> ProductDiscount | None:
    return db.get(ProductDiscount, discount_id)


def to_field_dict(obj: ProductDiscount) -> dict[str, Any]:
    return {name: getattr(obj, name) for name in _FIELDS}


def apply_product_discount(db: Session, obj: ProductDiscount, fields: dict[str, Any]) -> ProductDiscount:
    for k, v in fields.items():
        setattr(obj, k, v)
    _commit(db, fields["disc_code"])
    db.refresh(obj)
    return obj


def _filters(
    status: str | None,
    target_type: str | None,
    disc_type: str | None,
    search: str | None,
) -> list:
    clauses = []
    if status:
        clauses.append(ProductDiscount.disc_status == status.upper())
    if target_type:
        clauses.append(ProductDiscount.target_type == target_type.lower())
    if disc_type:
        clauses.append(ProductDiscount.disc_type == disc_type.lower())
    if search:
        pattern = f"%{search.strip()}%"
        clauses.append(
            or_(ProductDiscount.disc_code.ilike(pattern), ProductDiscount.disc_notes.ilike(pattern))
        )
    return clauses


def list_product_discounts(
    db: Session,
    page: int = 1,
    limit: int = 25,
    status: str | None = None,
    target_type: str | None = None,
    disc_type: str | None = None,
    search: str | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> tuple[list[ProductDiscount], int]:
    clauses = _filters(status, target_type, disc_type, search)
    column = _SORT_COLUMNS.get(sort_by, ProductDiscount.created_at)
    ordering = column.desc() if sort_order.lower() == "desc" else column.asc()

    stmt = select(ProductDiscount)
    count_stmt = select(func.count()).select_from(ProductDiscount)
    if clauses:
        stmt = stmt.where(and_(*clauses))
        count_stmt = count_stmt.where(and_(*clauses))
    stmt = stmt.order_by(ordering, ProductDiscount.id.desc()).offset((page - 1) * limit).limit(limit)

    rows = list(db.execute(stmt).scalars().all())
    total = db.execute(count_stmt).scalar_one()
    return rows, total


def delete_product_discount(db: Session, discount_id: int) -> bool:
    obj = db.get(ProductDiscount, discount_id)
    if not obj:
        return False

    db.delete(obj)
    db.commit()
    return True


def bulk_delete_product_discounts(db: Session, discount_ids: list[int]) -> int:
    if not discount_ids:
        return 0
    result = db.execute(delete(ProductDiscount).where(ProductDiscount.id.in_(discount_ids)))
    db.commit()
    return result.rowcount or 0


def get_product_discount_stats(db: Session) -> dict[str, Any]:
    def _count(*clauses) -> int:
        stmt = select(func.count()).select_from(ProductDiscount)
        if clauses:
            stmt = stmt.where(*clauses)
        return db.execute(stmt).scalar_one()

    return {
        "total": _count(),
        "active": _count(ProductDiscount.disc_status == "A"),
        "inactive": _count(ProductDiscount.disc_status == "I"),
        "by_target": {
            target: _count(ProductDiscount.target_type == target) for target in TARGET_TYPES
        },
        "percentage": _count(ProductDiscount.disc_type == "percentage"),
        "amount": _count(ProductDiscount.disc_type == "amount"),
    }


def get_active_product_discounts_for_product(
    db: Session,
    product_id: int,
    category_ids: Iterable[int],
    product_type: str | None,
    cart_subtotal: Decimal,
    current_date: str,
) -> list[ProductDiscount]:
    """
    Active discounts applicable to one product on current_date (YYYYMMDD) for
    the given cart subtotal, matched by global, product, category or
    product-type target. Largest percentage first, then largest amount.
    """
    category_ids = list(category_ids or [])
    target_matches = [
        ProductDiscount.target_type == "global",
        and_(ProductDiscount.target_type == "product", ProductDiscount.target_id == product_id),
    ]
    if category_ids:
        target_matches.append(
            and_(
                ProductDiscount.target_type == "category",
                ProductDiscount.target_id.in_(category_ids),
            )
        )
    if product_type:
        target_matches.append(
            and_(
                ProductDiscount.target_type == "product_type",
                ProductDiscount.target_product_type == product_type.lower(),
            )
        )

    stmt = (
        select(ProductDiscount)
        .where(
            ProductDiscount.disc_status == "A",
            ProductDiscount.disc_valid_from <= current_date,
            ProductDiscount.disc_valid_to >= current_date,
            ProductDiscount.disc_from_amt <= cart_subtotal,
            ProductDiscount.disc_to_amt >= cart_subtotal,
            or_(*target_matches),
        )
        .order_by(
            ProductDiscount.disc_perc.desc().nulls_last(),
            ProductDiscount.disc_amt.desc().nulls_last(),
            ProductDiscount.id.asc(),
        )
    )
    return list(db.execute(stmt).scalars().all())
