"""Pydantic schemas for authentication."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from jobapp.models import User
from jobapp.utils.dates import to_iso
from jobapp.schemas.common_schema import PaginationMeta

from .ids import encode_user_id


class RegisterRequest(BaseModel):
    """
    Request schema for account registration.

    Fields are optional here so that missing values are reported by the
    account validator alongside every other violation.
    """

    email: Optional[str] = None
    password: Optional[str] = None
    forename: Optional[str] = None
    surname: Optional[str] = None


class LoginRequest(BaseModel):
    """Request schema for login."""

    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    """Request schema for updating the caller's own profile."""

    forename: Optional[str] = None
    surname: Optional[str] = None


class UserStatusRequest(BaseModel):
    """Request schema for activating or deactivating an account."""

    is_active: bool = Field(..., description="New active flag")


class UserInfo(BaseModel):
    """Public view of an account. The id is the encoded form."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    forename: str
    surname: str
    role: str
    is_active: bool
    last_login: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(
            id=encode_user_id(user.id),
            email=user.email,
            forename=user.forename,
            surname=user.surname,
            role=user.role.value,
            is_active=user.is_active,
            last_login=to_iso(user.last_login),
            created_at=to_iso(user.created_at),
            updated_at=to_iso(user.updated_at),
        )


class UserListResponse(BaseModel):
    users: list[UserInfo]
    pagination: PaginationMeta


class LogoutResponse(BaseModel):
    """Response schema for logout."""

    message: str = "Successfully logged out"
