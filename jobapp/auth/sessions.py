"""
Server-side session management.

A session moves Absent -> Active -> (Expired | Destroyed). Expiry is checked
every time a token is resolved, so an expired record behaves exactly like a
missing one even before the cleanup sweep removes it.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from jobapp.core.settings import settings
from jobapp.models import Role
from jobapp.utils.dates import utcnow

from .models import UserSession

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


@dataclass(frozen=True)
class SessionContext:
    """Identity a valid session authenticates as."""

    user_id: int
    role: Role
    expires_at: datetime
    token: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class SessionManager:
    """Creates, resolves and destroys sessions stored in user_sessions."""

    def __init__(
        self,
        db: Session,
        max_age: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.max_age = max_age or timedelta(minutes=settings.session_max_age_minutes)
        self._clock = clock

    def _lookup(self, token: str) -> Optional[UserSession]:
        return (
            self.db.query(UserSession)
            .filter(UserSession.session_id == token)
            .first()
        )

    def _exists(self, token: str) -> bool:
        return self._lookup(token) is not None

    def _new_token(self) -> str:
        while True:
            token = secrets.token_urlsafe(TOKEN_BYTES)
            if not self._exists(token):
                return token

    def create(
        self,
        user_id: int,
        role: Role,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> tuple[str, datetime]:
        """
        Start a session for an authenticated account.

        Returns:
            Tuple of (token, expiry)
        """
        now = self._clock()
        token = self._new_token()
        expires_at = now + self.max_age

        record = UserSession(
            session_id=token,
            user_id=user_id,
            role=Role(role).value,
            created_at=now,
            expires_at=expires_at,
            user_agent=user_agent[:512] if user_agent else None,
            ip_address=ip_address,
        )
        self.db.add(record)
        self.db.commit()

        return token, expires_at

    def resolve(self, token: Optional[str]) -> Optional[SessionContext]:
        """Return the session's identity, or None if absent or expired."""
        if not token:
            return None

        record = self._lookup(token)
        if record is None:
            return None
        if record.expires_at <= self._clock():
            return None

        return SessionContext(
            user_id=record.user_id,
            role=Role(record.role),
            expires_at=record.expires_at,
            token=token,
        )

    def destroy(self, token: Optional[str]) -> None:
        """End a session. Destroying an absent session is not an error."""
        if not token:
            return
        deleted = (
            self.db.query(UserSession)
            .filter(UserSession.session_id == token)
            .delete()
        )
        self.db.commit()
        if deleted:
            logger.info("Session destroyed")

    def destroy_all_for_user(self, user_id: int) -> int:
        """End every session of an account (used on deactivation)."""
        deleted = (
            self.db.query(UserSession)
            .filter(UserSession.user_id == user_id)
            .delete()
        )
        self.db.commit()
        logger.info(f"Destroyed {deleted} session(s) for user {user_id}")
        return deleted

    def cleanup_expired(self) -> int:
        """
        Remove expired sessions from the database.

        Returns:
            Number of sessions removed
        """
        deleted = (
            self.db.query(UserSession)
            .filter(UserSession.expires_at <= self._clock())
            .delete()
        )
        self.db.commit()
        return deleted
