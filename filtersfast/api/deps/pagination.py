from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, Query

from filtersfast.core.config import settings

MAX_BULK_IDS = 100


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int


def get_page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ADMIN_LIST_DEFAULT_LIMIT, ge=1, le=100),
) -> PageParams:
    return PageParams(page=page, limit=limit)


def total_pages(total: int, limit: int) -> int:
    return (total + limit - 1) // limit if total else 0


def parse_bulk_ids(ids: str) -> list[int]:
    """Comma-separated positive integer ids, 1 to MAX_BULK_IDS of them."""
    parsed: list[int] = []
    for token in (ids or "").split(","):
        token = token.strip()
        if not token:
            continue
        if not token.isdigit() or int(token) <= 0:
            raise HTTPException(status_code=400, detail=f"Invalid id: {token}")
        parsed.append(int(token))
    if not parsed:
        raise HTTPException(status_code=400, detail="No ids provided")
    if len(parsed) > MAX_BULK_IDS:
        raise HTTPException(status_code=400, detail=f"Cannot delete more than {MAX_BULK_IDS} items at once")
    return list(dict.fromkeys(parsed))
