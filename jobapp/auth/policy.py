"""
Authorization rules.

Two checks compose here: a role gate (is this role allowed at all) and an
ownership gate (is this caller the owner of the resource). Status rules for
applications sit alongside them because they bound what an owner may do.
"""

from typing import Iterable, Optional

from jobapp.models import (
    EDITABLE_STATUSES,
    TERMINAL_STATUSES,
    WITHDRAWABLE_STATUSES,
    JobApplication,
    Role,
    User,
)

from .service import NOT_AUTHENTICATED, AuthenticationError
from .sessions import SessionContext
from .validation import normalize_email


class AuthorizationError(Exception):
    """Raised when an authenticated caller is not allowed to act."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)


class StatusConflictError(Exception):
    """Raised when an application's status does not allow the action."""

    pass


def ensure_role(context: Optional[SessionContext], roles: Iterable[Role]) -> SessionContext:
    """
    Role gate.

    Raises:
        AuthenticationError: if there is no valid session
        AuthorizationError: if the session's role is not permitted
    """
    if context is None:
        raise AuthenticationError(NOT_AUTHENTICATED)
    if context.role not in {Role(r) for r in roles}:
        raise AuthorizationError()
    return context


def is_owner(application: JobApplication, user: User) -> bool:
    if application.applicant_user_id is not None:
        return application.applicant_user_id == user.id
    # Submitted without a session; fall back to the contact email.
    return normalize_email(user.email) == application.applicant_email


def ensure_owner(
    application: JobApplication,
    session_user: Optional[User] = None,
    claimed_email: Optional[str] = None,
) -> None:
    """
    Ownership gate.

    A session identity is checked against the recorded applicant. Without a
    session, a claimed contact email must match the application's email, and
    is only accepted for applications not linked to an account.

    Raises:
        AuthenticationError: if there is no session and no usable claimed email
        AuthorizationError: if the caller is not the owner
    """
    if session_user is not None:
        if not is_owner(application, session_user):
            raise AuthorizationError("You can only modify your own applications")
        return

    # Linked applications need the owning account's session
    if application.applicant_user_id is not None:
        raise AuthenticationError(NOT_AUTHENTICATED)

    if claimed_email and claimed_email.strip():
        if normalize_email(claimed_email) != application.applicant_email:
            raise AuthorizationError("You can only modify your own applications")
        return

    raise AuthenticationError(NOT_AUTHENTICATED)


def ensure_withdrawable(status: str) -> None:
    if status in TERMINAL_STATUSES or status not in WITHDRAWABLE_STATUSES:
        raise StatusConflictError(f"Cannot withdraw application with status '{status}'")


def ensure_editable(status: str) -> None:
    if status in TERMINAL_STATUSES or status not in EDITABLE_STATUSES:
        raise StatusConflictError(f"Cannot update application with status '{status}'")
