from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from filtersfast.api.deps.pagination import PageParams, get_page_params, parse_bulk_ids, total_pages
from filtersfast.api.deps.rate_limit import enforce_rate_limit
from filtersfast.crud.deals import (
    bulk_delete_deals,
    delete_deal,
    get_deal,
    get_deal_stats,
    list_deals,
)
from filtersfast.db.session import get_db
from filtersfast.schemas.bulk import BulkDeleteOut
from filtersfast.schemas.deal import DealCreate, DealListOut, DealOut, DealStatsOut, DealUpdate
from filtersfast.services.discount_rule_service import (
    DiscountRuleValidationError,
    create_deal,
    update_deal,
)

router = APIRouter(
    prefix="/api/admin/deals",
    tags=["deals"],
    dependencies=[Depends(enforce_rate_limit)],
)


@router.get("", response_model=DealListOut)
def list_deals_api(
    params: PageParams = Depends(get_page_params),
    active: bool | None = Query(None),
    search: str | None = Query(None, max_length=100),
    sort_by: str = Query("start_price"),
    sort_order: str = Query("asc"),
    db: Session = Depends(get_db),
):
    rows, total = list_deals(
        db,
        page=params.page,
        limit=params.limit,
        active=active,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return DealListOut(
        deals=[DealOut.model_validate(row) for row in rows],
        total=total,
        page=params.page,
        limit=params.limit,
        total_pages=total_pages(total, params.limit),
    )


@router.get("/stats", response_model=DealStatsOut)
def deal_stats_api(db: Session = Depends(get_db)):
    return get_deal_stats(db)


@router.post("", response_model=DealOut, status_code=status.HTTP_201_CREATED)
def create_deal_api(payload: DealCreate, db: Session = Depends(get_db)):
    try:
        return create_deal(db, payload.model_dump())
    except DiscountRuleValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.delete("", response_model=BulkDeleteOut)
def bulk_delete_deals_api(ids: str = Query(...), db: Session = Depends(get_db)):
    deal_ids = parse_bulk_ids(ids)
    deleted = bulk_delete_deals(db, deal_ids)
    return BulkDeleteOut(deleted=deleted, requested=len(deal_ids))


@router.get("/{deal_id}", response_model=DealOut)
def get_deal_api(deal_id: int, db: Session = Depends(get_db)):
    obj = get_deal(db, deal_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Deal not found")
    return obj


@router.patch("/{deal_id}", response_model=DealOut)
def update_deal_api(deal_id: int, payload: DealUpdate, db: Session = Depends(get_db)):
    try:
        obj = update_deal(db, deal_id, payload.model_dump(exclude_unset=True))
    except DiscountRuleValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    if not obj:
        raise HTTPException(status_code=404, detail="Deal not found")
    return obj


@router.delete("/{deal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_deal_api(deal_id: int, db: Session = Depends(get_db)):
    ok = delete_deal(db, deal_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Deal not found")
    return None
