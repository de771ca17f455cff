from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from filtersfast.api.deps.pagination import PageParams, get_page_params, parse_bulk_ids, total_pages
from filtersfast.api.deps.rate_limit import enforce_rate_limit
from filtersfast.crud.errors import DuplicateError
from filtersfast.crud.order_discounts import (
    bulk_delete_order_discounts,
    delete_order_discount,
    get_order_discount,
    get_order_discount_stats,
    list_order_discounts,
)
from filtersfast.db.session import get_db
from filtersfast.schemas.bulk import BulkDeleteOut
from filtersfast.schemas.order_discount import (
    OrderDiscountCreate,
    OrderDiscountListOut,
    OrderDiscountOut,
    OrderDiscountStatsOut,
    OrderDiscountUpdate,
)
from filtersfast.services.discount_rule_service import (
    DiscountRuleValidationError,
    create_order_discount,
    update_order_discount,
)

router = APIRouter(
    prefix="/api/admin/order-discounts",
    tags=["order-discounts"],
    dependencies=[Depends(enforce_rate_limit)],
)


@router.get("", response_model=OrderDiscountListOut)
def list_order_discounts_api(
    params: PageParams = Depends(get_page_params),
    discount_status: str | None = Query(None, alias="status", max_length=1),
    once_only: str | None = Query(None, max_length=1),
    search: str | None = Query(None, max_length=50),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
    db: Session = Depends(get_db),
):
    rows, total = list_order_discounts(
        db,
        page=params.page,
        limit=params.limit,
        status=discount_status,
        once_only=once_only,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return OrderDiscountListOut(
        discounts=[OrderDiscountOut.model_validate(row) for row in rows],
        total=total,
        page=params.page,
        limit=params.limit,
        total_pages=total_pages(total, params.limit),
    )


@router.get("/stats", response_model=OrderDiscountStatsOut)
def order_discount_stats_api(db: Session = Depends(get_db)):
    return get_order_discount_stats(db)


@router.post("", response_model=OrderDiscountOut, status_code=status.HTTP_201_CREATED)
def create_order_discount_api(payload: OrderDiscountCreate, db: Session = Depends(get_db)):
    try:
        return create_order_discount(db, payload.model_dump())
    except DiscountRuleValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except DuplicateError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("", response_model=BulkDeleteOut)
def bulk_delete_order_discounts_api(ids: str = Query(...), db: Session = Depends(get_db)):
    discount_ids = parse_bulk_ids(ids)
    deleted = bulk_delete_order_discounts(db, discount_ids)
    return BulkDeleteOut(deleted=deleted, requested=len(discount_ids))


@router.get("/{discount_id}", response_model=OrderDiscountOut)
def get_order_discount_api(discount_id: int, db: Session = Depends(get_db)):
    obj = get_order_discount(db, discount_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Order discount not found")
    return obj


@router.patch("/{discount_id}", response_model=OrderDiscountOut)
def update_order_discount_api(
    discount_id: int,
    payload: OrderDiscountUpdate,
    db: Session = Depends(get_db),
):
    try:
        obj = update_order_discount(db, discount_id, payload.model_dump(exclude_unset=True))
    except DiscountRuleValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except DuplicateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not obj:
        raise HTTPException(status_code=404, detail="Order discount not found")
    return obj


@router.delete("/{discount_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order_discount_api(discount_id: int, db: Session = Depends(get_db)):
    ok = delete_order_discount(db, discount_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Order discount not found")
    return None
