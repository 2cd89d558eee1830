"""
Job Role Router - Endpoints for advertised job roles.

Reading is public; changes and the per-role application list require an
administrator session.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from jobapp.api.deps import get_pagination
from jobapp.api.services.job_role_service import JobRoleError, JobRoleService
from jobapp.auth.deps import AdminUser
from jobapp.db.deps import get_db
from jobapp.schemas.application_schema import ApplicationListResponse, ApplicationOut
from jobapp.schemas.common_schema import MessageResponse, PaginationMeta
from jobapp.schemas.job_role_schema import (
    JobRoleCreate,
    JobRoleListResponse,
    JobRoleOut,
    JobRoleSearchResponse,
    JobRoleUpdate,
)
from jobapp.utils.pagination import PaginationParams

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/job-roles", tags=["job-roles"])


@router.get("/", response_model=JobRoleListResponse)
def list_job_roles(
    pagination: PaginationParams = Depends(get_pagination),
    job_status: Optional[str] = Query(None, alias="status", description="Filter by status"),
    capability: Optional[str] = Query(None, description="Filter by capability"),
    location: Optional[str] = Query(None, description="Filter by location"),
    band: Optional[str] = Query(None, description="Filter by band"),
    db: Session = Depends(get_db),
):
    """List job roles, newest first, with optional filters."""
    job_roles, total = JobRoleService(db).list_job_roles(
        pagination,
        status=job_status,
        capability=capability,
        location=location,
        band=band,
    )
    return JobRoleListResponse(
        job_roles=[JobRoleOut.model_validate(r) for r in job_roles],
        pagination=PaginationMeta.build(total, pagination),
    )


@router.get("/active", response_model=list[JobRoleOut])
def list_active_job_roles(
    capability: Optional[str] = Query(None, description="Filter by capability"),
    location: Optional[str] = Query(None, description="Filter by location"),
    band: Optional[str] = Query(None, description="Filter by band"),
    db: Session = Depends(get_db),
):
    """Job roles that are open and whose closing date has not passed."""
    job_roles = JobRoleService(db).list_active_job_roles(
        capability=capability,
        location=location,
        band=band,
    )
    return [JobRoleOut.model_validate(r) for r in job_roles]


@router.get("/search", response_model=JobRoleSearchResponse)
def search_job_roles(
    q: Optional[str] = Query(None, description="Search term"),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """Search job roles by name, description, location or capability."""
    try:
        job_roles, total = JobRoleService(db).search_job_roles(q, pagination)
    except JobRoleError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return JobRoleSearchResponse(
        search_term=q.strip(),
        job_roles=[JobRoleOut.model_validate(r) for r in job_roles],
        pagination=PaginationMeta.build(total, pagination),
    )


@router.get("/{job_role_id}", response_model=JobRoleOut)
def get_job_role(job_role_id: int, db: Session = Depends(get_db)):
    try:
        return JobRoleOut.model_validate(JobRoleService(db).get_job_role(job_role_id))
    except JobRoleError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/", response_model=JobRoleOut, status_code=status.HTTP_201_CREATED)
def create_job_role(
    request: JobRoleCreate,
    admin: AdminUser,
    db: Session = Depends(get_db),
):
    """Create a job role."""
    job_role = JobRoleService(db).create_job_role(request.model_dump())
    return JobRoleOut.model_validate(job_role)


@router.put("/{job_role_id}", response_model=JobRoleOut)
def update_job_role(
    job_role_id: int,
    request: JobRoleUpdate,
    admin: AdminUser,
    db: Session = Depends(get_db),
):
    """Update the given fields of a job role."""
    try:
        job_role = JobRoleService(db).update_job_role(
            job_role_id,
            request.model_dump(exclude_unset=True, exclude_none=True),
        )
    except JobRoleError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return JobRoleOut.model_validate(job_role)


@router.delete("/{job_role_id}", response_model=MessageResponse)
def delete_job_role(
    job_role_id: int,
    admin: AdminUser,
    db: Session = Depends(get_db),
):
    """Delete a job role and its applications."""
    try:
        JobRoleService(db).delete_job_role(job_role_id)
    except JobRoleError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return MessageResponse(message="Job role deleted successfully")


@router.get("/{job_role_id}/applications", response_model=ApplicationListResponse)
def list_job_role_applications(
    job_role_id: int,
    admin: AdminUser,
    db: Session = Depends(get_db),
):
    """All applications submitted for a job role."""
    try:
        applications = JobRoleService(db).get_applications_for_role(job_role_id)
    except JobRoleError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return ApplicationListResponse(
        applications=[ApplicationOut.from_model(a) for a in applications],
    )
