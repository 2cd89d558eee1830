"""Shared FastAPI dependencies for the API routers."""

from typing import Optional

from fastapi import HTTPException, Query, status

from jobapp.utils.pagination import (
    PaginationError,
    PaginationParams,
    validate_pagination_params,
)


def get_pagination(
    page: Optional[int] = Query(None, description="Page number (from 1)"),
    limit: Optional[int] = Query(None, description="Results per page (1-100)"),
) -> PaginationParams:
    try:
        return validate_pagination_params(page, limit)
    except PaginationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
