"""Page/limit parsing and pagination metadata for list endpoints."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 12
MIN_PAGE = 1
MIN_LIMIT = 1
MAX_LIMIT = 100


class PaginationError(ValueError):
    """Raised when page or limit are out of range."""

    pass


@dataclass(frozen=True)
class PaginationParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def validate_pagination_params(
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> PaginationParams:
    """
    Validate page/limit query values, applying defaults for missing ones.

    Raises:
        PaginationError: if page < 1 or limit is outside 1..100
    """
    if page is None:
        page = DEFAULT_PAGE
    elif page < MIN_PAGE:
        raise PaginationError(
            f"Page must be a positive integer greater than or equal to {MIN_PAGE}"
        )

    if limit is None:
        limit = DEFAULT_LIMIT
    elif limit < MIN_LIMIT or limit > MAX_LIMIT:
        raise PaginationError(
            f"Limit must be a positive integer between {MIN_LIMIT} and {MAX_LIMIT}"
        )

    return PaginationParams(page=page, limit=limit)


def calculate_pagination_metadata(total_count: int, current_page: int, limit: int) -> dict:
    total_pages = math.ceil(total_count / limit) if limit else 0
    return {
        "current_page": current_page,
        "total_pages": total_pages,
        "total_count": total_count,
        "limit": limit,
        "has_next": current_page < total_pages,
        "has_previous": current_page > 1,
    }
