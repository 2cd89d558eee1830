"""Authentication service - account registration, login and sessions."""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from jobapp.models import Role, User
from jobapp.utils.dates import utcnow

from .passwords import dummy_hash, hash_password, verify_password
from .repository import UserRepository
from .sessions import SessionContext, SessionManager
from .validation import (
    RegistrationData,
    validate_login,
    validate_profile_update,
    validate_registration,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
NOT_AUTHENTICATED = "Not authenticated"


class AuthenticationError(Exception):
    """Raised when authentication fails."""

    def __init__(self, message: str = INVALID_CREDENTIALS):
        super().__init__(message)


class UserNotFoundError(Exception):
    """Raised when an administrative action targets a missing account."""

    pass


class AuthService:
    """Service for account authentication and session operations."""

    def __init__(self, db: Session, sessions: Optional[SessionManager] = None):
        self.db = db
        self.users = UserRepository(db)
        self.sessions = sessions or SessionManager(db)

    # ---------------------------
    # Registration
    # ---------------------------

    def register(self, payload: Mapping[str, Any]) -> User:
        """
        Register a new Applicant account.

        Raises:
            ValidationFailed: if the payload is invalid
            DuplicateEmailError: if the email is already registered
        """
        data = validate_registration(payload)
        return self.create_account(data, Role.APPLICANT)

    def create_account(self, data: RegistrationData, role: Role) -> User:
        user = self.users.insert(
            email=data.email,
            password_hash=hash_password(data.password),
            forename=data.forename,
            surname=data.surname,
            role=role,
        )
        logger.info(f"Registered {role.value} account {user.id}")
        return user

    # ---------------------------
    # Login / logout
    # ---------------------------

    def authenticate(self, email: str, password: str) -> User:
        """
        Check credentials against the stored hash.

        Unknown email, wrong password and inactive account all raise the same
        error. An unknown email still costs one bcrypt verification.

        Raises:
            AuthenticationError: if authentication fails
        """
        user = self.users.find_by_email(email)

        if user is None:
            verify_password(dummy_hash(), password)
            logger.warning(f"Login failed for {email}: unknown account")
            raise AuthenticationError()

        if not verify_password(user.password_hash, password):
            logger.warning(f"Login failed for {email}: wrong password")
            raise AuthenticationError()

        if not user.is_active:
            logger.warning(f"Login failed for {email}: account inactive")
            raise AuthenticationError()

        return user

    def login(
        self,
        payload: Mapping[str, Any],
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> tuple[User, str, datetime]:
        """
        Validate, authenticate and open a session.

        Returns:
            Tuple of (user, session token, session expiry)
        """
        data = validate_login(payload)
        user = self.authenticate(data.email, data.password)

        self.users.touch_last_login(user.id, utcnow())
        token, expires_at = self.sessions.create(
            user.id,
            user.role,
            user_agent=user_agent,
            ip_address=ip_address,
        )
        self.db.refresh(user)

        logger.info(f"Successful login for user {user.id}")
        return user, token, expires_at

    def logout(self, token: Optional[str]) -> None:
        self.sessions.destroy(token)

    def current_user(self, context: Optional[SessionContext]) -> User:
        """
        Load the account a session authenticates as.

        Raises:
            AuthenticationError: if there is no session or the account is
                gone or inactive
        """
        if context is None:
            raise AuthenticationError(NOT_AUTHENTICATED)

        user = self.users.find_by_id(context.user_id)
        if user is None or not user.is_active:
            raise AuthenticationError(NOT_AUTHENTICATED)
        return user

    # ---------------------------
    # Account maintenance
    # ---------------------------

    def update_profile(self, user: User, payload: Mapping[str, Any]) -> User:
        data = validate_profile_update(payload)
        return self.users.update_profile(user, forename=data.forename, surname=data.surname)

    def set_active(self, user_id: int, is_active: bool) -> User:
        """
        Activate or deactivate an account.

        Deactivation ends every live session of the account.
        """
        user = self.users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError("User not found")

        user = self.users.set_active(user, is_active)
        if not is_active:
            self.sessions.destroy_all_for_user(user.id)

        logger.info(f"User {user.id} {'activated' if is_active else 'deactivated'}")
        return user

    def list_users(self, offset: int, limit: int) -> tuple[list[User], int]:
        return self.users.list_users(offset, limit), self.users.count_users()
