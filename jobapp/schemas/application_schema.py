from __future__ import annotations

import typing

from pydantic import BaseModel, Field

from jobapp.auth.ids import encode_user_id
from jobapp.models import ApplicationStatus, JobApplication
from jobapp.schemas.common_schema import PaginationMeta, UTCDateTime


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus = Field(..., description="New application status")


class ApplicationOut(BaseModel):
    id: int
    job_role_id: int
    job_role_name: typing.Optional[str] = None
    applicant_id: typing.Optional[str] = None  # encoded user id
    applicant_name: str
    applicant_email: str
    cover_letter: typing.Optional[str] = None
    resume_url: typing.Optional[str] = None
    has_cv: bool
    cv_file_name: typing.Optional[str] = None
    cv_mime_type: typing.Optional[str] = None
    status: str
    submitted_at: UTCDateTime
    updated_at: UTCDateTime

    @classmethod
    def from_model(cls, application: JobApplication) -> "ApplicationOut":
        return cls(
            id=application.id,
            job_role_id=application.job_role_id,
            job_role_name=application.job_role.job_role_name if application.job_role else None,
            applicant_id=(
                encode_user_id(application.applicant_user_id)
                if application.applicant_user_id is not None
                else None
            ),
            applicant_name=application.applicant_name,
            applicant_email=application.applicant_email,
            cover_letter=application.cover_letter,
            resume_url=application.resume_url,
            has_cv=application.has_cv,
            cv_file_name=application.cv_file_name,
            cv_mime_type=application.cv_mime_type,
            status=application.status,
            submitted_at=application.submitted_at,
            updated_at=application.updated_at,
        )


class ApplicationListResponse(BaseModel):
    applications: list[ApplicationOut]
    pagination: typing.Optional[PaginationMeta] = None
