"""
User Router - Account administration.

Requires an administrator session.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from jobapp.api.deps import get_pagination
from jobapp.auth.deps import AdminUser
from jobapp.auth.ids import decode_user_id
from jobapp.auth.schemas import UserInfo, UserListResponse, UserStatusRequest
from jobapp.auth.service import AuthService, UserNotFoundError
from jobapp.db.deps import get_db
from jobapp.schemas.common_schema import PaginationMeta
from jobapp.utils.pagination import PaginationParams

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/", response_model=UserListResponse)
def list_users(
    admin: AdminUser,
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """List accounts by creation order."""
    users, total = AuthService(db).list_users(pagination.offset, pagination.limit)
    return UserListResponse(
        users=[UserInfo.from_user(u) for u in users],
        pagination=PaginationMeta.build(total, pagination),
    )


@router.patch("/{user_id}/status", response_model=UserInfo)
def update_user_status(
    user_id: str,
    request: UserStatusRequest,
    admin: AdminUser,
    db: Session = Depends(get_db),
):
    """
    Activate or deactivate an account.

    user_id is the encoded id from UserInfo. Deactivating an account ends
    all of its sessions.
    """
    internal_id = decode_user_id(user_id)
    if internal_id is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    try:
        user = AuthService(db).set_active(internal_id, request.is_active)
    except UserNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    return UserInfo.from_user(user)
