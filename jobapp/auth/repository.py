"""Account persistence used by the auth service."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobapp.models import Role, User
from jobapp.utils.dates import utcnow

from .validation import normalize_email

logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    """Raised when an email is already registered."""

    pass


class UserRepository:
    """Lookups and writes against the users table."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.email == normalize_email(email))
            .first()
        )

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def insert(
        self,
        email: str,
        password_hash: str,
        forename: str,
        surname: str,
        role: Role = Role.APPLICANT,
    ) -> User:
        """
        Create an account.

        Uniqueness is enforced by the users_email_uk index, so two concurrent
        registrations of the same email cannot both succeed.

        Raises:
            DuplicateEmailError: if the email is already registered
        """
        now = utcnow()
        user = User(
            email=normalize_email(email),
            password_hash=password_hash,
            forename=forename,
            surname=surname,
            role=role,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateEmailError("Email is already registered")

        self.db.refresh(user)
        return user

    def touch_last_login(self, user_id: int, timestamp: datetime) -> None:
        user = self.find_by_id(user_id)
        if user is None:
            return
        user.last_login = timestamp
        user.updated_at = timestamp
        self.db.commit()

    def update_profile(
        self,
        user: User,
        forename: Optional[str] = None,
        surname: Optional[str] = None,
    ) -> User:
        if forename is not None:
            user.forename = forename
        if surname is not None:
            user.surname = surname
        user.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(user)
        return user

    def set_active(self, user: User, is_active: bool) -> User:
        user.is_active = is_active
        user.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(user)
        return user

    def list_users(self, offset: int = 0, limit: int = 50) -> list[User]:
        return (
            self.db.query(User)
            .order_by(User.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

    def count_users(self) -> int:
        return self.db.query(func.count(User.id)).scalar() or 0
