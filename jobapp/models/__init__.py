"""SQLAlchemy ORM models."""

from jobapp.models.models import (
    Base,
    Role,
    JobRoleStatus,
    ApplicationStatus,
    EDITABLE_STATUSES,
    WITHDRAWABLE_STATUSES,
    TERMINAL_STATUSES,
    User,
    JobRole,
    JobApplication,
)

__all__ = [
    "Base",
    "Role",
    "JobRoleStatus",
    "ApplicationStatus",
    "EDITABLE_STATUSES",
    "WITHDRAWABLE_STATUSES",
    "TERMINAL_STATUSES",
    "User",
    "JobRole",
    "JobApplication",
]
