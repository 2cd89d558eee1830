"""Authentication API router."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from jobapp.core.settings import settings
from jobapp.db.deps import get_db

from .deps import CurrentUser, client_origin, get_login_limiter, get_session_token
from .rate_limit import LoginRateLimiter, RateLimitExceeded
from .repository import DuplicateEmailError
from .schemas import (
    LoginRequest,
    LogoutResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    UserInfo,
)
from .service import AuthService, AuthenticationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserInfo, status_code=status.HTTP_201_CREATED)
def register(
    register_data: RegisterRequest,
    db: Session = Depends(get_db),
):
    """
    Register a new applicant account.

    - **email**: login handle, stored lower-cased
    - **password**: at least 8 characters with upper, lower, digit and symbol
    - **forename** / **surname**: at most 50 characters each
    """
    auth_service = AuthService(db)

    try:
        user = auth_service.register(register_data.model_dump())
    except DuplicateEmailError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )

    return UserInfo.from_user(user)


@router.post("/login", response_model=UserInfo)
def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    db: Session = Depends(get_db),
    limiter: LoginRateLimiter = Depends(get_login_limiter),
):
    """
    Authenticate with email and password and start a session.

    The session token is returned as an HttpOnly cookie. Wrong password,
    unknown email and inactive account all give the same 401.
    """
    origin = client_origin(request)
    try:
        limiter.check(origin)
    except RateLimitExceeded as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(e),
            headers={"Retry-After": str(e.retry_after)},
        )

    auth_service = AuthService(db)

    try:
        user, token, expires_at = auth_service.login(
            login_data.model_dump(),
            user_agent=request.headers.get("user-agent"),
            ip_address=request.client.host if request.client else None,
        )
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
        max_age=settings.session_max_age_minutes * 60,
        path="/",
    )

    return UserInfo.from_user(user)


@router.post("/logout", response_model=LogoutResponse)
def logout(
    response: Response,
    session_token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    """
    Destroy the current session and clear the cookie.

    Always succeeds, with or without a live session.
    """
    AuthService(db).logout(session_token)
    response.delete_cookie(key=settings.session_cookie_name, path="/")
    return LogoutResponse()


@router.get("/me", response_model=UserInfo)
def get_current_user_info(current_user: CurrentUser):
    """Get the current account's profile."""
    return UserInfo.from_user(current_user)


@router.patch("/me", response_model=UserInfo)
def update_current_user(
    update_data: ProfileUpdateRequest,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    """Update forename and/or surname of the current account."""
    user = AuthService(db).update_profile(
        current_user,
        update_data.model_dump(exclude_none=True),
    )
    return UserInfo.from_user(user)
