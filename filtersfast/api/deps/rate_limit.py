from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException, Request

from filtersfast.core.config import settings
from filtersfast.core.rate_limit import InMemoryRateLimiter, RateLimiter


@lru_cache(maxsize=1)
def get_rate_limiter() -> RateLimiter:
    return InMemoryRateLimiter(
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        sweep_seconds=settings.RATE_LIMIT_SWEEP_SECONDS,
    )


def get_client_identifier(request: Request) -> str:
    email = (request.headers.get("X-User-Email") or "").strip().lower()
    if email:
        return f"user:{email}"
    forwarded = request.headers.get("X-Forwarded-For") or ""
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return f"ip:{first_hop}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"


def enforce_rate_limit(request: Request) -> None:
    if not settings.RATE_LIMIT_ENABLED:
        return
    if not get_rate_limiter().check(get_client_identifier(request)):
        raise HTTPException(status_code=429, detail="Rate limit exceeded")
