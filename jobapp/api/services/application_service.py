"""
Application Service - Business logic for job applications.

Covers submission with CV upload, applicant edits, administrator status
changes and applicant withdrawal. Ownership is checked by the router through
jobapp.auth.policy before any of the owner operations here are called.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, undefer

from jobapp.auth.policy import StatusConflictError, ensure_editable, ensure_withdrawable
from jobapp.auth.validation import is_valid_email, normalize_email
from jobapp.core.settings import settings
from jobapp.models import (
    TERMINAL_STATUSES,
    ApplicationStatus,
    JobApplication,
    JobRole,
    JobRoleStatus,
    User,
)
from jobapp.utils.dates import utcnow
from jobapp.utils.pagination import PaginationParams

logger = logging.getLogger(__name__)

APPLICANT_NAME_MAX_LENGTH = 100
RESUME_URL_MAX_LENGTH = 500


class ApplicationError(Exception):
    """Raised when a job application operation fails."""

    def __init__(self, message: str, status_code: int = 400):
        self.status_code = status_code
        super().__init__(message)


@dataclass(frozen=True)
class CvUpload:
    file_name: str
    mime_type: str
    data: bytes


def validate_cv(cv: CvUpload) -> None:
    """
    Check an uploaded CV's type and size.

    Raises:
        ApplicationError: if the file is empty, too large or of a
            type that is not accepted
    """
    if cv.mime_type not in settings.cv_allowed_mime_types:
        raise ApplicationError("CV must be a PDF or Word document")
    if not cv.data:
        raise ApplicationError("CV file is empty")
    if len(cv.data) > settings.cv_max_bytes:
        raise ApplicationError(
            f"CV file must be at most {settings.cv_max_bytes // (1024 * 1024)} MB"
        )


class ApplicationService:
    """Service for job application operations."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self) -> Query:
        return self.db.query(JobApplication)

    def get_application(self, application_id: int) -> JobApplication:
        application = self.db.get(JobApplication, application_id)
        if application is None:
            raise ApplicationError("Application not found", status_code=404)
        return application

    # ---------------------------
    # Submission
    # ---------------------------

    def submit(
        self,
        job_role_id: Optional[int],
        applicant_name: Optional[str],
        applicant_email: Optional[str],
        cv: Optional[CvUpload],
        cover_letter: Optional[str] = None,
        resume_url: Optional[str] = None,
        applicant: Optional[User] = None,
    ) -> JobApplication:
        """
        Submit an application for a job role.

        The application is linked to the applicant's account when submitted
        with a session. Uniqueness of (job role, email) is enforced by the
        store.

        Raises:
            ApplicationError: 400 for invalid input or a role that is not
                accepting applications, 404 for an unknown role, 409 for a
                duplicate application
        """
        applicant_name = (applicant_name or "").strip()
        applicant_email = (applicant_email or "").strip()

        if job_role_id is None or not applicant_name or not applicant_email:
            raise ApplicationError("Job role ID, applicant name, and email are required")
        if len(applicant_name) > APPLICANT_NAME_MAX_LENGTH:
            raise ApplicationError(
                f"Applicant name must be at most {APPLICANT_NAME_MAX_LENGTH} characters"
            )
        if not is_valid_email(applicant_email):
            raise ApplicationError("Invalid email format")
        if resume_url and len(resume_url) > RESUME_URL_MAX_LENGTH:
            raise ApplicationError(
                f"Resume URL must be at most {RESUME_URL_MAX_LENGTH} characters"
            )
        if cv is None:
            raise ApplicationError("CV file is required")
        validate_cv(cv)

        job_role = self.db.get(JobRole, job_role_id)
        if job_role is None:
            raise ApplicationError("Job role not found", status_code=404)
        if job_role.status != JobRoleStatus.ACTIVE.value:
            raise ApplicationError("This job role is not currently accepting applications")
        if job_role.number_of_open_positions <= 0:
            raise ApplicationError("There are no open positions available for this job role")
        if job_role.closing_date <= utcnow():
            raise ApplicationError("The application deadline for this job role has passed")

        now = utcnow()
        application = JobApplication(
            job_role_id=job_role.id,
            applicant_user_id=applicant.id if applicant is not None else None,
            applicant_name=applicant_name,
            applicant_email=normalize_email(applicant_email),
            cover_letter=cover_letter or None,
            resume_url=resume_url or None,
            cv_data=cv.data,
            cv_file_name=cv.file_name,
            cv_mime_type=cv.mime_type,
            status=ApplicationStatus.PENDING.value,
            submitted_at=now,
            updated_at=now,
        )
        self.db.add(application)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ApplicationError(
                "You have already applied for this job role",
                status_code=409,
            )

        self.db.refresh(application)
        logger.info(f"Application {application.id} submitted for job role {job_role.id}")
        return application

    # ---------------------------
    # Queries
    # ---------------------------

    def list_applications(
        self,
        params: PaginationParams,
        status: Optional[str] = None,
        job_role_id: Optional[int] = None,
        applicant_email: Optional[str] = None,
    ) -> tuple[list[JobApplication], int]:
        query = self._query()
        if status:
            query = query.filter(JobApplication.status == status)
        if job_role_id is not None:
            query = query.filter(JobApplication.job_role_id == job_role_id)
        if applicant_email:
            query = query.filter(
                JobApplication.applicant_email == normalize_email(applicant_email)
            )

        total = query.count()
        applications = (
            query.order_by(JobApplication.submitted_at.desc(), JobApplication.id.desc())
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )
        return applications, total

    def list_for_user(self, user: User) -> list[JobApplication]:
        """Applications owned by an account, including ones sent before it existed."""
        return (
            self._query()
            .filter(
                or_(
                    JobApplication.applicant_user_id == user.id,
                    and_(
                        JobApplication.applicant_user_id.is_(None),
                        JobApplication.applicant_email == normalize_email(user.email),
                    ),
                )
            )
            .order_by(JobApplication.submitted_at.desc(), JobApplication.id.desc())
            .all()
        )

    def get_cv(self, application_id: int) -> CvUpload:
        application = (
            self._query()
            .options(undefer(JobApplication.cv_data))
            .filter(JobApplication.id == application_id)
            .first()
        )
        if application is None:
            raise ApplicationError("Application not found", status_code=404)
        if not application.has_cv or application.cv_data is None:
            raise ApplicationError("CV not found for this application", status_code=404)
        return CvUpload(
            file_name=application.cv_file_name,
            mime_type=application.cv_mime_type or "application/octet-stream",
            data=application.cv_data,
        )

    # ---------------------------
    # Mutations
    # ---------------------------

    def update_application(
        self,
        application: JobApplication,
        cover_letter: Optional[str] = None,
        resume_url: Optional[str] = None,
        cv: Optional[CvUpload] = None,
    ) -> JobApplication:
        """
        Applicant edit of cover letter, resume link and/or CV.

        Only allowed while the application is still editable.
        """
        try:
            ensure_editable(application.status)
        except StatusConflictError as e:
            raise ApplicationError(str(e), status_code=409)

        if cover_letter is None and resume_url is None and cv is None:
            raise ApplicationError(
                "At least one field (cover letter, resume URL, or CV) must be provided"
            )
        if resume_url and len(resume_url) > RESUME_URL_MAX_LENGTH:
            raise ApplicationError(
                f"Resume URL must be at most {RESUME_URL_MAX_LENGTH} characters"
            )
        if cv is not None:
            validate_cv(cv)

        if cover_letter is not None:
            application.cover_letter = cover_letter
        if resume_url is not None:
            application.resume_url = resume_url
        if cv is not None:
            application.cv_data = cv.data
            application.cv_file_name = cv.file_name
            application.cv_mime_type = cv.mime_type
        application.updated_at = utcnow()

        self.db.commit()
        self.db.refresh(application)
        logger.info(f"Application {application.id} updated by applicant")
        return application

    def update_status(self, application_id: int, new_status: str) -> JobApplication:
        """
        Administrator status change.

        Any canonical status may be set, except that a terminal application
        cannot be moved to a different status.
        """
        new_status = ApplicationStatus(new_status).value
        application = self.get_application(application_id)

        if application.status in TERMINAL_STATUSES and application.status != new_status:
            raise ApplicationError(
                f"Cannot change status of application with status '{application.status}'",
                status_code=409,
            )

        if application.status != new_status:
            old_status = application.status
            application.status = new_status
            application.updated_at = utcnow()
            self.db.commit()
            self.db.refresh(application)
            logger.info(
                f"Application {application_id} status changed: {old_status} -> {new_status}"
            )
        return application

    def withdraw(self, application: JobApplication) -> JobApplication:
        """
        Withdraw an application on the applicant's behalf.

        Only status and updated_at change.
        """
        try:
            ensure_withdrawable(application.status)
        except StatusConflictError as e:
            raise ApplicationError(str(e), status_code=409)

        application.status = ApplicationStatus.WITHDRAWN.value
        application.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(application)
        logger.info(f"Application {application.id} withdrawn")
        return application

    def delete_application(self, application_id: int) -> None:
        application = self.get_application(application_id)
        self.db.delete(application)
        self.db.commit()
        logger.info(f"Deleted application {application_id}")
