from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from filtersfast.models.b2b_account import B2BAccount
from filtersfast.schemas.b2b import B2BAccountCreate, B2BAccountUpdate


def _enum_value(value):
    return getattr(value, "value", value)


def create_b2b_account(db: Session, data: B2BAccountCreate) -> B2BAccount:
    obj = B2BAccount(**{k: _enum_value(v) for k, v in data.model_dump().items()})
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def get_b2b_account(db: Session, account_id: int) -> B2BAccount | None:
    return db.get(B2BAccount, account_id)


def list_b2b_accounts(
    db: Session,
    skip: int = 0,
    limit: int = 50,
    status: str | None = None,
) -> list[B2BAccount]:
    stmt = select(B2BAccount).order_by(B2BAccount.id.desc()).offset(skip).limit(limit)
    if status:
        stmt = stmt.where(B2BAccount.status == status)
    return list(db.execute(stmt).scalars().all())


def update_b2b_account(db: Session, account_id: int, data: B2BAccountUpdate) -> B2BAccount | None:
    obj = get_b2b_account(db, account_id)
    if not obj:
        return None

    for k, v in data.model_dump(exclude_unset=True).items():
        setattr(obj, k, _enum_value(v))

    db.commit()
    db.refresh(obj)
    return obj
