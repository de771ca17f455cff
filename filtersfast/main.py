import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from filtersfast.api.routers.b2b import router as b2b_router
from filtersfast.api.routers.cart_rewards import router as cart_rewards_router
from filtersfast.api.routers.deals import router as deals_router
from filtersfast.api.routers.order_discounts import router as order_discounts_router
from filtersfast.api.routers.product_discounts import router as product_discounts_router
from filtersfast.api.routers.tier_pricing import router as tier_pricing_router

logger = logging.getLogger(__name__)

app = FastAPI(title="FiltersFast Pricing API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("request_validation_failed path=%s errors=%s", request.url.path, len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request",
            "details": jsonable_encoder(exc.errors()),
        },
    )


app.include_router(cart_rewards_router)
app.include_router(tier_pricing_router)
app.include_router(b2b_router)
app.include_router(deals_router)
app.include_router(order_discounts_router)
app.include_router(product_discounts_router)


@app.get("/health")
def health():
    return {"status": "up"}
