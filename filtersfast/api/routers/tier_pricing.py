from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from filtersfast.api.deps.rate_limit import enforce_rate_limit
from filtersfast.crud.tier_pricing import (
    TierPricingValidationError,
    create_tier_pricing,
    delete_tier_pricing,
    get_tier_pricing,
    list_tier_pricing,
    update_tier_pricing,
)
from filtersfast.db.session import get_db
from filtersfast.schemas.tier_pricing import (
    PriceBreakOut,
    TierPricingCreate,
    TierPricingOut,
    TierPricingResultOut,
    TierPricingUpdate,
    TierQuoteRequest,
    TierQuoteResponse,
    TierValidateRequest,
    TierValidateResponse,
)
from filtersfast.services.catalog import SqlCatalog
from filtersfast.services.tier_pricing_service import (
    calculate_tier_price,
    format_tier_pricing,
    get_moq_incentive,
    get_tier_price_breaks,
    validate_tier_pricing,
)

router = APIRouter(tags=["tier-pricing"], dependencies=[Depends(enforce_rate_limit)])


def _lookup_tier_pricing(catalog: SqlCatalog, product_id: int | None, sku: str | None):
    tier_pricing = None
    if product_id:
        tier_pricing = catalog.get_tier_pricing_by_product_id(product_id)
    if tier_pricing is None and sku:
        tier_pricing = catalog.get_tier_pricing_by_sku(sku)
    return tier_pricing


@router.post("/api/b2b/tier-pricing/quote", response_model=TierQuoteResponse)
def quote_tier_price_api(payload: TierQuoteRequest, db: Session = Depends(get_db)):
    tier_pricing = _lookup_tier_pricing(SqlCatalog(db), payload.product_id, payload.sku)
    result = calculate_tier_price(payload.base_price, payload.quantity, tier_pricing)
    incentive = None
    if payload.moq:
        incentive = get_moq_incentive(payload.base_price, payload.quantity, payload.moq, tier_pricing)
    return TierQuoteResponse(
        pricing=TierPricingResultOut.model_validate(result),
        display=format_tier_pricing(result),
        moq_incentive=incentive,
    )


@router.post("/api/b2b/tier-pricing/validate", response_model=TierValidateResponse)
def validate_tier_pricing_api(payload: TierValidateRequest):
    result = validate_tier_pricing(payload.tiers)
    return TierValidateResponse(valid=result.valid, errors=result.errors)


@router.post(
    "/api/admin/tier-pricing",
    response_model=TierPricingOut,
    status_code=status.HTTP_201_CREATED,
)
def create_tier_pricing_api(payload: TierPricingCreate, db: Session = Depends(get_db)):
    try:
        return create_tier_pricing(db, payload)
    except TierPricingValidationError as e:
        raise HTTPException(status_code=400, detail=e.errors)


@router.get("/api/admin/tier-pricing", response_model=list[TierPricingOut])
def list_tier_pricing_api(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    product_id: int | None = Query(None, ge=1),
    sku: str | None = Query(None),
    db: Session = Depends(get_db),
):
    return list_tier_pricing(db, skip=skip, limit=limit, product_id=product_id, sku=sku)


@router.get("/api/admin/tier-pricing/{tier_pricing_id}", response_model=TierPricingOut)
def get_tier_pricing_api(tier_pricing_id: int, db: Session = Depends(get_db)):
    obj = get_tier_pricing(db, tier_pricing_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Tier pricing not found")
    return obj


@router.get(
    "/api/admin/tier-pricing/{tier_pricing_id}/price-breaks",
    response_model=list[PriceBreakOut],
)
def get_price_breaks_api(
    tier_pricing_id: int,
    base_price: Decimal = Query(..., ge=0),
    max_quantity: int = Query(100, ge=1, le=100000),
    db: Session = Depends(get_db),
):
    obj = get_tier_pricing(db, tier_pricing_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Tier pricing not found")
    return get_tier_price_breaks(base_price, obj, max_quantity=max_quantity)


@router.patch("/api/admin/tier-pricing/{tier_pricing_id}", response_model=TierPricingOut)
def update_tier_pricing_api(
    tier_pricing_id: int,
    payload: TierPricingUpdate,
    db: Session = Depends(get_db),
):
    try:
        obj = update_tier_pricing(db, tier_pricing_id, payload)
    except TierPricingValidationError as e:
        raise HTTPException(status_code=400, detail=e.errors)
    if not obj:
        raise HTTPException(status_code=404, detail="Tier pricing not found")
    return obj


@router.delete("/api/admin/tier-pricing/{tier_pricing_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tier_pricing_api(tier_pricing_id: int, db: Session = Depends(get_db)):
    ok = delete_tier_pricing(db, tier_pricing_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Tier pricing not found")
    return None
