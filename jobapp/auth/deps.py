"""FastAPI dependencies for authentication."""

from typing import Annotated, Optional

from fastapi import Cookie, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from jobapp.core.settings import settings
from jobapp.db.deps import get_db
from jobapp.models import Role, User

from .policy import AuthorizationError, ensure_role
from .rate_limit import LoginRateLimiter
from .service import AuthService, AuthenticationError
from .sessions import SessionContext, SessionManager


def get_session_token(
    session_token: Optional[str] = Cookie(default=None, alias=settings.session_cookie_name),
) -> Optional[str]:
    return session_token


def get_session_context(
    db: Session = Depends(get_db),
    session_token: Optional[str] = Depends(get_session_token),
) -> Optional[SessionContext]:
    """
    Resolve the session cookie to an identity.

    Returns None for a missing, unknown or expired session; handlers decide
    whether that is acceptable.
    """
    return SessionManager(db).resolve(session_token)


SessionContextDep = Annotated[Optional[SessionContext], Depends(get_session_context)]


def get_current_user(
    context: SessionContextDep,
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency to get the current authenticated account.

    Raises:
        HTTPException 401: If not authenticated
    """
    try:
        return AuthService(db).current_user(context)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )


def get_current_user_optional(
    context: SessionContextDep,
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Optional version of get_current_user.

    Returns None instead of raising an exception if not authenticated.
    """
    try:
        return AuthService(db).current_user(context)
    except AuthenticationError:
        return None


def require_roles(*roles: Role):
    """
    Build a dependency admitting only sessions whose role is in roles.

    Uses the role stored on the session, so no account lookup is needed.
    No valid session gives 401; a valid session with another role gives 403.
    """

    def dependency(context: SessionContextDep) -> SessionContext:
        try:
            return ensure_role(context, roles)
        except AuthenticationError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(e),
            )
        except AuthorizationError as e:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=str(e),
            )

    return dependency


def get_login_limiter(request: Request) -> LoginRateLimiter:
    return request.app.state.login_limiter


def client_origin(request: Request) -> str:
    return request.client.host if request.client else "unknown"


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[Optional[User], Depends(get_current_user_optional)]
AdminUser = Annotated[SessionContext, Depends(require_roles(Role.ADMIN))]
ApplicantUser = Annotated[SessionContext, Depends(require_roles(Role.APPLICANT))]
