"""Authentication module: password hashing, sessions and authorization."""

from .deps import AdminUser, CurrentUser, OptionalUser, get_current_user, require_roles
from .router import router as auth_router
from .service import AuthService, AuthenticationError

__all__ = [
    "AdminUser",
    "AuthService",
    "AuthenticationError",
    "CurrentUser",
    "OptionalUser",
    "auth_router",
    "get_current_user",
    "require_roles",
]
