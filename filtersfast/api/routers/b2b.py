from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from filtersfast.api.deps.rate_limit import enforce_rate_limit
from filtersfast.crud.b2b_accounts import (
    create_b2b_account,
    get_b2b_account,
    list_b2b_accounts,
    update_b2b_account,
)
from filtersfast.db.session import get_db
from filtersfast.schemas.b2b import (
    B2BAccountCreate,
    B2BAccountOut,
    B2BAccountUpdate,
    B2BPriceQuoteRequest,
    B2BPriceQuoteResponse,
    CreditCheckRequest,
    CreditCheckResponse,
)
from filtersfast.schemas.tier_pricing import TierPricingResultOut
from filtersfast.services.b2b_pricing_service import (
    apply_b2b_discount,
    calculate_b2b_price,
    calculate_due_date,
    can_place_order,
)
from filtersfast.services.catalog import SqlCatalog

router = APIRouter(tags=["b2b"], dependencies=[Depends(enforce_rate_limit)])


def _require_account(db: Session, account_id: int):
    account = get_b2b_account(db, account_id)
    if not account:
        raise HTTPException(status_code=404, detail="B2B account not found")
    return account


@router.post("/api/b2b/price-quote", response_model=B2BPriceQuoteResponse)
def b2b_price_quote_api(payload: B2BPriceQuoteRequest, db: Session = Depends(get_db)):
    account = _require_account(db, payload.account_id)
    result = calculate_b2b_price(
        payload.base_price,
        payload.quantity,
        account,
        product_id=payload.product_id,
        sku=payload.sku,
        catalog=SqlCatalog(db),
    )
    return B2BPriceQuoteResponse(
        account_id=account.id,
        discounted_base_price=apply_b2b_discount(payload.base_price, account),
        pricing=TierPricingResultOut.model_validate(result),
    )


@router.post("/api/b2b/credit-check", response_model=CreditCheckResponse)
def credit_check_api(payload: CreditCheckRequest, db: Session = Depends(get_db)):
    account = _require_account(db, payload.account_id)
    decision = can_place_order(account, payload.order_total)
    due_date = None
    if decision.allowed:
        due_date = calculate_due_date(payload.order_date or date.today(), account.payment_terms)
    return CreditCheckResponse(allowed=decision.allowed, reason=decision.reason, due_date=due_date)


@router.post(
    "/api/admin/b2b-accounts",
    response_model=B2BAccountOut,
    status_code=status.HTTP_201_CREATED,
)
def create_b2b_account_api(payload: B2BAccountCreate, db: Session = Depends(get_db)):
    return create_b2b_account(db, payload)


@router.get("/api/admin/b2b-accounts", response_model=list[B2BAccountOut])
def list_b2b_accounts_api(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    account_status: str | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    return list_b2b_accounts(db, skip=skip, limit=limit, status=account_status)


@router.get("/api/admin/b2b-accounts/{account_id}", response_model=B2BAccountOut)
def get_b2b_account_api(account_id: int, db: Session = Depends(get_db)):
    return _require_account(db, account_id)


@router.patch("/api/admin/b2b-accounts/{account_id}", response_model=B2BAccountOut)
def update_b2b_account_api(account_id: int, payload: B2BAccountUpdate, db: Session = Depends(get_db)):
    obj = update_b2b_account(db, account_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="B2B account not found")
    return obj
