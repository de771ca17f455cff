from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from filtersfast.api.deps.pagination import PageParams, get_page_params, parse_bulk_ids, total_pages
from filtersfast.api.deps.rate_limit import enforce_rate_limit
from filtersfast.api.deps.request_identity import get_request_email
from filtersfast.crud.errors import DuplicateError
from filtersfast.crud.product_discounts import (
    bulk_delete_product_discounts,
    delete_product_discount,
    get_product_discount,
    get_product_discount_stats,
    list_product_discounts,
)
from filtersfast.db.session import get_db
from filtersfast.schemas.bulk import BulkDeleteOut
from filtersfast.schemas.product_discount import (
    ProductDiscountCreate,
    ProductDiscountListOut,
    ProductDiscountOut,
    ProductDiscountStatsOut,
    ProductDiscountUpdate,
)
from filtersfast.services.discount_rule_service import (
    DiscountRuleValidationError,
    create_product_discount,
    update_product_discount,
)

router = APIRouter(
    prefix="/api/admin/product-discounts",
    tags=["product-discounts"],
    dependencies=[Depends(enforce_rate_limit)],
)


@router.get("", response_model=ProductDiscountListOut)
def list_product_discounts_api(
    params: PageParams = Depends(get_page_params),
    discount_status: str | None = Query(None, alias="status", max_length=1),
    target_type: str | None = Query(None, max_length=20),
    disc_type: str | None = Query(None, max_length=20),
    search: str | None = Query(None, max_length=50),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
    db: Session = Depends(get_db),
):
    rows, total = list_product_discounts(
        db,
        page=params.page,
        limit=params.limit,
        status=discount_status,
        target_type=target_type,
        disc_type=disc_type,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ProductDiscountListOut(
        discounts=[ProductDiscountOut.model_validate(row) for row in rows],
        total=total,
        page=params.page,
        limit=params.limit,
        total_pages=total_pages(total, params.limit),
    )


@router.get("/stats", response_model=ProductDiscountStatsOut)
def product_discount_stats_api(db: Session = Depends(get_db)):
    return get_product_discount_stats(db)


@router.post("", response_model=ProductDiscountOut, status_code=status.HTTP_201_CREATED)
def create_product_discount_api(
    payload: ProductDiscountCreate,
    db: Session = Depends(get_db),
    current_user_email: str = Depends(get_request_email),
):
    try:
        return create_product_discount(db, payload.model_dump(), created_by=current_user_email)
    except DiscountRuleValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except DuplicateError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("", response_model=BulkDeleteOut)
def bulk_delete_product_discounts_api(ids: str = Query(...), db: Session = Depends(get_db)):
    discount_ids = parse_bulk_ids(ids)
    deleted = bulk_delete_product_discounts(db, discount_ids)
    return BulkDeleteOut(deleted=deleted, requested=len(discount_ids))


@router.get("/{discount_id}", response_model=ProductDiscountOut)
def get_product_discount_api(discount_id: int, db: Session = Depends(get_db)):
    obj = get_product_discount(db, discount_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Product discount not found")
    return obj


@router.patch("/{discount_id}", response_model=ProductDiscountOut)
def update_product_discount_api(
    discount_id: int,
    payload: ProductDiscountUpdate,
    db: Session = Depends(get_db),
):
    try:
        obj = update_product_discount(db, discount_id, payload.model_dump(exclude_unset=True))
    except DiscountRuleValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except DuplicateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not obj:
        raise HTTPException(status_code=404, detail="Product discount not found")
    return obj


@router.delete("/{discount_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product_discount_api(discount_id: int, db: Session = Depends(get_db)):
    ok = delete_product_discount(db, discount_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Product discount not found")
    return None
