from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from filtersfast.api.deps.rate_limit import enforce_rate_limit
from filtersfast.db.session import get_db
from filtersfast.schemas.cart_rewards import CartRewardsRequest, CartRewardsResponse
from filtersfast.services.cart_rewards_service import CartRewardsService
from filtersfast.services.catalog import SqlCatalog

router = APIRouter(
    prefix="/api/cart",
    tags=["cart"],
    dependencies=[Depends(enforce_rate_limit)],
)


@router.post("/rewards", response_model=CartRewardsResponse)
def calculate_cart_rewards_api(payload: CartRewardsRequest, db: Session = Depends(get_db)):
    result = CartRewardsService(SqlCatalog(db)).calculate(payload.items, payload.subtotal)
    return CartRewardsResponse(
        success=True,
        rewards=[asdict(reward) for reward in result.rewards],
        applied_deals=[asdict(deal) for deal in result.applied_deals],
    )
