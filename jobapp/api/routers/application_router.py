"""
Application Router - Endpoints for job applications.

Submission is open to anyone (the application is linked to the account when
a session is present). Reading a single application or its CV requires an
administrator or the owner; editing and withdrawing require the owner.
"""

import logging
import re
from typing import Optional
from urllib.parse import quote

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Header,
    HTTPException,
    Query,
    Response,
    UploadFile,
    status,
)
from sqlalchemy.orm import Session

from jobapp.api.deps import get_pagination
from jobapp.api.services.application_service import (
    ApplicationError,
    ApplicationService,
    CvUpload,
)
from jobapp.auth.deps import AdminUser, CurrentUser, OptionalUser
from jobapp.auth.policy import AuthorizationError, ensure_owner
from jobapp.auth.service import AuthenticationError
from jobapp.db.deps import get_db
from jobapp.models import JobApplication, Role, User
from jobapp.schemas.application_schema import (
    ApplicationListResponse,
    ApplicationOut,
    ApplicationStatusUpdate,
)
from jobapp.schemas.common_schema import MessageResponse, PaginationMeta
from jobapp.utils.pagination import PaginationParams

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/applications", tags=["applications"])

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._ -]")


async def _read_cv(cv: Optional[UploadFile]) -> Optional[CvUpload]:
    if cv is None or not cv.filename:
        return None
    return CvUpload(
        file_name=cv.filename,
        mime_type=cv.content_type or "",
        data=await cv.read(),
    )


def _content_disposition(file_name: str) -> str:
    """Attachment header with an ASCII fallback name and the RFC 5987 form."""
    fallback = _UNSAFE_FILENAME_CHARS.sub("_", file_name) or "cv"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name, safe='')}"


def _get_or_404(service: ApplicationService, application_id: int) -> JobApplication:
    try:
        return service.get_application(application_id)
    except ApplicationError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


def _check_owner(
    application: JobApplication,
    user: Optional[User],
    claimed_email: Optional[str] = None,
    allow_admin: bool = False,
) -> None:
    if allow_admin and user is not None and user.role == Role.ADMIN:
        return
    try:
        ensure_owner(application, session_user=user, claimed_email=claimed_email)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )
    except AuthorizationError as e:
        logger.warning(f"Ownership check failed for application {application.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )


# ---------------------------
# Endpoints
# ---------------------------


@router.post("/", response_model=ApplicationOut, status_code=status.HTTP_201_CREATED)
async def submit_application(
    current_user: OptionalUser,
    job_role_id: Optional[int] = Form(None),
    applicant_name: Optional[str] = Form(None),
    applicant_email: Optional[str] = Form(None),
    cover_letter: Optional[str] = Form(None),
    resume_url: Optional[str] = Form(None),
    cv: Optional[UploadFile] = File(None, description="CV (PDF or Word document)"),
    db: Session = Depends(get_db),
):
    """Submit an application with a CV for an open job role."""
    cv_upload = await _read_cv(cv)
    service = ApplicationService(db)

    try:
        application = service.submit(
            job_role_id=job_role_id,
            applicant_name=applicant_name,
            applicant_email=applicant_email,
            cv=cv_upload,
            cover_letter=cover_letter,
            resume_url=resume_url,
            applicant=current_user,
        )
    except ApplicationError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return ApplicationOut.from_model(application)


@router.get("/", response_model=ApplicationListResponse)
def list_applications(
    admin: AdminUser,
    pagination: PaginationParams = Depends(get_pagination),
    application_status: Optional[str] = Query(None, alias="status"),
    job_role_id: Optional[int] = Query(None),
    applicant_email: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """List all applications (administrators)."""
    applications, total = ApplicationService(db).list_applications(
        pagination,
        status=application_status,
        job_role_id=job_role_id,
        applicant_email=applicant_email,
    )
    return ApplicationListResponse(
        applications=[ApplicationOut.from_model(a) for a in applications],
        pagination=PaginationMeta.build(total, pagination),
    )


@router.get("/mine", response_model=ApplicationListResponse)
def list_my_applications(
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    """Applications owned by the current account."""
    applications = ApplicationService(db).list_for_user(current_user)
    return ApplicationListResponse(
        applications=[ApplicationOut.from_model(a) for a in applications],
    )


@router.get("/{application_id}", response_model=ApplicationOut)
def get_application(
    application_id: int,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    """Application details (administrators or the owner)."""
    application = _get_or_404(ApplicationService(db), application_id)
    _check_owner(application, current_user, allow_admin=True)
    return ApplicationOut.from_model(application)


@router.get("/{application_id}/cv", response_class=Response)
def download_cv(
    application_id: int,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    """Download the CV attached to an application."""
    service = ApplicationService(db)
    application = _get_or_404(service, application_id)
    _check_owner(application, current_user, allow_admin=True)

    try:
        cv = service.get_cv(application_id)
    except ApplicationError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return Response(
        content=cv.data,
        media_type=cv.mime_type,
        headers={"Content-Disposition": _content_disposition(cv.file_name)},
    )


@router.put("/{application_id}", response_model=ApplicationOut)
async def update_application(
    application_id: int,
    current_user: CurrentUser,
    cover_letter: Optional[str] = Form(None),
    resume_url: Optional[str] = Form(None),
    cv: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    """Edit cover letter, resume link or CV while the application is editable."""
    service = ApplicationService(db)
    application = _get_or_404(service, application_id)
    _check_owner(application, current_user)

    cv_upload = await _read_cv(cv)
    try:
        application = service.update_application(
            application,
            cover_letter=cover_letter,
            resume_url=resume_url,
            cv=cv_upload,
        )
    except ApplicationError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return ApplicationOut.from_model(application)


@router.patch("/{application_id}/status", response_model=ApplicationOut)
def update_application_status(
    application_id: int,
    request: ApplicationStatusUpdate,
    admin: AdminUser,
    db: Session = Depends(get_db),
):
    """Set an application's status (administrators)."""
    try:
        application = ApplicationService(db).update_status(application_id, request.status)
    except ApplicationError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return ApplicationOut.from_model(application)


@router.post("/{application_id}/withdraw", response_model=ApplicationOut)
def withdraw_application(
    application_id: int,
    current_user: OptionalUser,
    x_user_email: Optional[str] = Header(None, alias="X-User-Email"),
    db: Session = Depends(get_db),
):
    """
    Withdraw an application.

    The caller must own the application: either through their session or,
    without one, by giving the application's contact email in the
    X-User-Email header.
    """
    service = ApplicationService(db)
    application = _get_or_404(service, application_id)
    _check_owner(application, current_user, claimed_email=x_user_email)

    try:
        application = service.withdraw(application)
    except ApplicationError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return ApplicationOut.from_model(application)


@router.delete("/{application_id}", response_model=MessageResponse)
def delete_application(
    application_id: int,
    admin: AdminUser,
    db: Session = Depends(get_db),
):
    """Delete an application (administrators)."""
    try:
        ApplicationService(db).delete_application(application_id)
    except ApplicationError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return MessageResponse(message="Application deleted successfully")
