"""SQLAlchemy models for authentication/session management."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from jobapp.models import Base
from jobapp.utils.dates import utcnow


class UserSession(Base):
    """
    Server-side session bound to a browser cookie.

    Sessions are stored in the database so they survive server restarts and
    can be revoked at logout. The role is copied from the account at login
    so authorization checks do not need a user lookup per request.
    """

    __tablename__ = "user_sessions"
    __table_args__ = (
        Index("user_sessions_user_id_idx", "user_id"),
        Index("user_sessions_expires_idx", "expires_at"),
    )

    session_id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Opaque session token held by the client as a cookie",
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Role of the account at login time",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        comment="Absolute expiry; the session is dead once passed",
    )
    user_agent: Mapped[str | None] = mapped_column(
        String(512),
        nullable=True,
        comment="Browser user agent for audit",
    )
    ip_address: Mapped[str | None] = mapped_column(
        String(45),
        nullable=True,
        comment="Client IP address for audit",
    )
