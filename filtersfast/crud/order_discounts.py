from __future__ import annotations

from typing import Any

from sqlalchemy import and_, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from filtersfast.crud.errors import DuplicateError
from filtersfast.models.order_discount import OrderDiscount

_FIELDS = (
    "disc_code",
    "disc_perc",
    "disc_amt",
    "disc_from_amt",
    "disc_to_amt",
    "disc_status",
    "disc_once_only",
    "disc_valid_from",
    "disc_valid_to",
)

_SORT_COLUMNS = {
    "id": OrderDiscount.id,
    "disc_code": OrderDiscount.disc_code,
    "disc_perc": OrderDiscount.disc_perc,
    "disc_amt": OrderDiscount.disc_amt,
    "disc_valid_from": OrderDiscount.disc_valid_from,
    "disc_valid_to": OrderDiscount.disc_valid_to,
    "created_at": OrderDiscount.created_at,
}


def _commit(db: Session, code: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError(f"Discount code {code} already exists") from e


def create_order_discount(db: Session, fields: dict[str, Any]) -> OrderDiscount:
    obj = OrderDiscount(**fields)
    db.add(obj)
    _commit(db, fields["disc_code"])
    db.refresh(obj)
    return obj


def get_order_discount(db: Session, discount_id: int) -> OrderDiscount | None:
    return db.get(OrderDiscount, discount_id)


def to_field_dict(obj: OrderDiscount) -> dict[str, Any]:
    return {name: getattr(obj, name) for name in _FIELDS}


def apply_order_discount(db: Session, obj: OrderDiscount, fields: dict[str, Any]) -> OrderDiscount:
    for k, v in fields.items():
        setattr(obj, k, v)
    _commit(db, fields["disc_code"])
    db.refresh(obj)
    return obj


def _filters(status: str | None, once_only: str | None, search: str | None) -> list:
    clauses = []
    if status:
        clauses.append(OrderDiscount.disc_status == status.upper())
    if once_only:
        clauses.append(OrderDiscount.disc_once_only == once_only.upper())
    if search:
        clauses.append(OrderDiscount.disc_code.ilike(f"%{search.strip()}%"))
    return clauses


def list_order_discounts(
    db: Session,
    page: int = 1,
    limit: int = 25,
    status: str | None = None,
    once_only: str | None = None,
    search: str | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> tuple[list[OrderDiscount], int]:
    clauses = _filters(status, once_only, search)
    column = _SORT_COLUMNS.get(sort_by, OrderDiscount.created_at)
    ordering = column.desc() if sort_order.lower() == "desc" else column.asc()

    stmt = select(OrderDiscount)
    count_stmt = select(func.count()).select_from(OrderDiscount)
    if clauses:
        stmt = stmt.where(and_(*clauses))
        count_stmt = count_stmt.where(and_(*clauses))
    stmt = stmt.order_by(ordering, OrderDiscount.id.desc()).offset((page - 1) * limit).limit(limit)

    rows = list(db.execute(stmt).scalars().all())
    total = db.execute(count_stmt).scalar_one()
    return rows, total


def delete_order_discount(db: Session, discount_id: int) -> bool:
    obj = db.get(OrderDiscount, discount_id)
    if not obj:
        return False

    db.delete(obj)
    db.commit()
    return True


def bulk_delete_order_discounts(db: Session, discount_ids: list[int]) -> int:
    if not discount_ids:
        return 0
    result = db.execute(delete(OrderDiscount).where(OrderDiscount.id.in_(discount_ids)))
    db.commit()
    return result.rowcount or 0


def get_order_discount_stats(db: Session) -> dict[str, int]:
    def _count(*clauses) -> int:
        stmt = select(func.count()).select_from(OrderDiscount)
        if clauses:
            stmt = stmt.where(*clauses)
        return db.execute(stmt).scalar_one()

    return {
        "total": _count(),
        "active": _count(OrderDiscount.disc_status == "A"),
        "inactive": _count(OrderDiscount.disc_status == "I"),
        "used": _count(OrderDiscount.disc_status == "U"),
        "once_only": _count(OrderDiscount.disc_once_only == "Y"),
        "reusable": _count(OrderDiscount.disc_once_only == "N"),
    }
