import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from jobapp.utils.dates import utcnow


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for all ORM models.

    All mapped classes should ultimately inherit from this Base.
    """
    pass


class Role(str, Enum):
    """Coarse permission class of an account."""
    ADMIN = "Admin"
    APPLICANT = "Applicant"


class JobRoleStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    DRAFT = "draft"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    HIRED = "hired"
    WITHDRAWN = "withdrawn"


# Statuses an applicant may still edit (cover letter, CV, resume link)
EDITABLE_STATUSES = frozenset({
    ApplicationStatus.PENDING.value,
    ApplicationStatus.UNDER_REVIEW.value,
})

# Statuses an applicant may still withdraw from
WITHDRAWABLE_STATUSES = frozenset({
    ApplicationStatus.PENDING.value,
    ApplicationStatus.UNDER_REVIEW.value,
    ApplicationStatus.SHORTLISTED.value,
})

TERMINAL_STATUSES = frozenset({
    ApplicationStatus.HIRED.value,
    ApplicationStatus.REJECTED.value,
    ApplicationStatus.WITHDRAWN.value,
})


class User(Base):
    __tablename__ = 'users'
    __table_args__ = (
        Index('users_email_uk', 'email', unique=True),
        {'comment': 'Registered accounts (administrators and applicants).'}
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, comment='Internal identifier. Never exposed directly; see jobapp.auth.ids.')
    email: Mapped[str] = mapped_column(String(255), nullable=False, comment='Login handle, stored lower-cased.')
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False, comment='bcrypt hash of the password.')
    forename: Mapped[str] = mapped_column(String(50), nullable=False)
    surname: Mapped[str] = mapped_column(String(50), nullable=False)
    role: Mapped[Role] = mapped_column(
        SQLEnum(Role, name='user_role', values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.APPLICANT,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, comment='Inactive accounts cannot log in.')
    last_login: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, comment='Time of the last successful login.')
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    applications: Mapped[list['JobApplication']] = relationship('JobApplication', back_populates='applicant')

    def __repr__(self) -> str:
        return f"<User id={self.id} role={self.role.value if self.role else None}>"


class JobRole(Base):
    __tablename__ = 'job_roles'
    __table_args__ = (
        Index('job_roles_status_i', 'status'),
        {'comment': 'Advertised job roles.'}
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    job_role_name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    responsibilities: Mapped[str] = mapped_column(Text, nullable=False)
    job_spec_link: Mapped[str] = mapped_column(String(500), nullable=False)
    location: Mapped[str] = mapped_column(String(100), nullable=False)
    capability: Mapped[str] = mapped_column(String(100), nullable=False)
    band: Mapped[str] = mapped_column(String(50), nullable=False)
    closing_date: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=JobRoleStatus.ACTIVE.value)
    number_of_open_positions: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    applications: Mapped[list['JobApplication']] = relationship(
        'JobApplication',
        back_populates='job_role',
        cascade='all, delete-orphan',
        passive_deletes=True,
    )


class JobApplication(Base):
    __tablename__ = 'job_applications'
    __table_args__ = (
        UniqueConstraint('job_role_id', 'applicant_email', name='job_applications_role_email_uk'),
        Index('job_applications_email_i', 'applicant_email'),
        {'comment': 'Applications submitted against a job role.'}
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    job_role_id: Mapped[int] = mapped_column(ForeignKey('job_roles.id', ondelete='CASCADE'), nullable=False)
    applicant_user_id: Mapped[Optional[int]] = mapped_column(ForeignKey('users.id', ondelete='SET NULL'), comment='Owning account when submitted with a session.')
    applicant_name: Mapped[str] = mapped_column(String(100), nullable=False)
    applicant_email: Mapped[str] = mapped_column(String(255), nullable=False, comment='Contact email, stored lower-cased.')
    cover_letter: Mapped[Optional[str]] = mapped_column(Text)
    resume_url: Mapped[Optional[str]] = mapped_column(String(500))
    cv_data: Mapped[Optional[bytes]] = mapped_column(LargeBinary, deferred=True)
    cv_file_name: Mapped[Optional[str]] = mapped_column(String(255))
    cv_mime_type: Mapped[Optional[str]] = mapped_column(String(100))
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ApplicationStatus.PENDING.value)
    submitted_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    job_role: Mapped['JobRole'] = relationship('JobRole', back_populates='applications')
    applicant: Mapped[Optional['User']] = relationship('User', back_populates='applications')

    @property
    def has_cv(self) -> bool:
        return self.cv_file_name is not None
