from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.orm import Session, selectinload

from filtersfast.models.deal import Deal, DealRewardSku

_SORT_COLUMNS = {
    "id": Deal.id,
    "description": Deal.description,
    "start_price": Deal.start_price,
    "end_price": Deal.end_price,
    "units": Deal.units,
    "created_at": Deal.created_at,
}


def _query():
    return select(Deal).options(selectinload(Deal.reward_skus))


def _build_reward_skus(values: list[dict[str, Any]]) -> list[DealRewardSku]:
    return [
        DealRewardSku(
            sku=value["sku"],
            quantity=value["quantity"],
            price_override=value.get("price_override"),
        )
        for value in values
    ]


def get_applicable_deal(
    db: Session,
    subtotal: Decimal,
    now: datetime | None = None,
) -> Deal | None:
    """
    Active, currently valid deal whose inclusive [start_price, end_price] band
    contains subtotal. Overlapping bands resolve to the highest start_price.
    """
    now = now or datetime.utcnow()
    stmt = (
        _query()
        .where(
            Deal.active.is_(True),
            Deal.start_price <= subtotal,
            Deal.end_price >= subtotal,
            or_(Deal.valid_from.is_(None), Deal.valid_from <= now),
            or_(Deal.valid_to.is_(None), Deal.valid_to >= now),
        )
        .order_by(Deal.start_price.desc(), Deal.id.desc())
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def create_deal(db: Session, fields: dict[str, Any]) -> Deal:
    values = dict(fields)
    reward_skus = values.pop("reward_skus", [])
    obj = Deal(**values, reward_skus=_build_reward_skus(reward_skus))
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def get_deal(db: Session, deal_id: int) -> Deal | None:
    return db.execute(_query().where(Deal.id == deal_id)).scalars().first()


def to_field_dict(obj: Deal) -> dict[str, Any]:
    return {
        "description": obj.description,
        "start_price": obj.start_price,
        "end_price": obj.end_price,
        "units": obj.units,
        "active": obj.active,
        "reward_auto_add": obj.reward_auto_add,
        "valid_from": obj.valid_from,
        "valid_to": obj.valid_to,
        "reward_skus": [
            {"sku": r.sku, "quantity": r.quantity, "price_override": r.price_override}
            for r in obj.reward_skus
        ],
    }


def apply_deal(db: Session, obj: Deal, fields: dict[str, Any]) -> Deal:
    values = dict(fields)
    reward_skus = values.pop("reward_skus", None)
    for k, v in values.items():
        setattr(obj, k, v)
    if reward_skus is not None:
        obj.reward_skus = _build_reward_skus(reward_skus)
    db.commit()
    db.refresh(obj)
    return obj


def _filters(active: bool | None, search: str | None) -> list:
    clauses = []
    if active is not None:
        clauses.append(Deal.active.is_(active))
    if search:
        clauses.append(Deal.description.ilike(f"%{search.strip()}%"))
    return clauses


def list_deals(
    db: Session,
    page: int = 1,
    limit: int = 25,
    active: bool | None = None,
    search: str | None = None,
    sort_by: str = "start_price",
    sort_order: str = "asc",
) -> tuple[list[Deal], int]:
    clauses = _filters(active, search)
    column = _SORT_COLUMNS.get(sort_by, Deal.start_price)
    ordering = column.desc() if sort_order.lower() == "desc" else column.asc()

    stmt = _query().where(and_(*clauses)) if clauses else _query()
    stmt = stmt.order_by(ordering, Deal.id.asc()).offset((page - 1) * limit).limit(limit)

    count_stmt = select(func.count()).select_from(Deal)
    if clauses:
        count_stmt = count_stmt.where(and_(*clauses))

    rows = list(db.execute(stmt).scalars().all())
    total = db.execute(count_stmt).scalar_one()
    return rows, total


def delete_deal(db: Session, deal_id: int) -> bool:
    obj = db.get(Deal, deal_id)
    if not obj:
        return False

    db.delete(obj)
    db.commit()
    return True


def bulk_delete_deals(db: Session, deal_ids: list[int]) -> int:
    if not deal_ids:
        return 0
    db.execute(delete(DealRewardSku).where(DealRewardSku.deal_id.in_(deal_ids)))
    result = db.execute(delete(Deal).where(Deal.id.in_(deal_ids)))
    db.commit()
    return result.rowcount or 0


def get_deal_stats(db: Session) -> dict[str, int]:
    total = db.execute(select(func.count()).select_from(Deal)).scalar_one()
    active = db.execute(
        select(func.count()).select_from(Deal).where(Deal.active.is_(True))
    ).scalar_one()
    auto_add = db.execute(
        select(func.count()).select_from(Deal).where(Deal.reward_auto_add.is_(True))
    ).scalar_one()
    return {"total": total, "active": active, "inactive": total - active, "auto_add": auto_add}
