"""Shared utilities used across the app."""
import math

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100


def clamp_limit(limit: int | None) -> int:
    """Page size with the API defaults: missing or non-positive -> 10, anything above 100 -> 100."""
    if not limit or limit <= 0:
        return DEFAULT_PAGE_LIMIT
    return min(limit, MAX_PAGE_LIMIT)


def clamp_offset(offset: int | None) -> int:
    return max(0, offset or 0)


def build_pagination(total: int, offset: int, limit: int) -> dict:
    """Pagination block for list envelopes. `limit` must already be clamped."""
    page = offset // limit + 1
    total_pages = math.ceil(total / limit) if total else 0
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
