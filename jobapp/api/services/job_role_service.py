"""
Job Role Service - Business logic for advertised job roles.

Listing, filtering and text search are public; creating, updating and
deleting roles are administrator operations guarded at the router.
"""

import logging
from typing import Any, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from jobapp.models import JobApplication, JobRole, JobRoleStatus
from jobapp.utils.dates import utcnow
from jobapp.utils.pagination import PaginationParams

logger = logging.getLogger(__name__)

SEARCH_TERM_MAX_LENGTH = 200

FILTER_FIELDS = ("status", "capability", "location", "band")


class JobRoleError(Exception):
    """Raised when a job role operation fails."""

    def __init__(self, message: str, status_code: int = 400):
        self.status_code = status_code
        super().__init__(message)


def _normalize_status(data: dict[str, Any]) -> dict[str, Any]:
    if data.get("status") is not None:
        data = {**data, "status": JobRoleStatus(data["status"]).value}
    return data


class JobRoleService:
    """Service for job role operations."""

    def __init__(self, db: Session):
        self.db = db

    def _filtered(self, filters: dict[str, Optional[str]]) -> Query:
        query = self.db.query(JobRole)
        for field in FILTER_FIELDS:
            value = filters.get(field)
            if value:
                query = query.filter(getattr(JobRole, field) == value)
        return query

    def list_job_roles(
        self,
        params: PaginationParams,
        **filters: Optional[str],
    ) -> tuple[list[JobRole], int]:
        """
        List job roles, newest first.

        Returns:
            Tuple of (job roles on the requested page, total matching count)
        """
        query = self._filtered(filters)
        total = query.count()
        job_roles = (
            query.order_by(JobRole.created_at.desc(), JobRole.id.desc())
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )
        return job_roles, total

    def list_active_job_roles(self, **filters: Optional[str]) -> list[JobRole]:
        """Active roles whose closing date has not passed."""
        filters["status"] = JobRoleStatus.ACTIVE.value
        return (
            self._filtered(filters)
            .filter(JobRole.closing_date > utcnow())
            .order_by(JobRole.closing_date.asc())
            .all()
        )

    def search_job_roles(
        self,
        term: Optional[str],
        params: PaginationParams,
    ) -> tuple[list[JobRole], int]:
        """
        Case-insensitive substring search over name, description, location
        and capability.
        """
        term = (term or "").strip()
        if not term:
            raise JobRoleError("Search term is required")
        if len(term) > SEARCH_TERM_MAX_LENGTH:
            raise JobRoleError(
                f"Search term must be at most {SEARCH_TERM_MAX_LENGTH} characters"
            )

        pattern = f"%{term.lower()}%"
        query = self.db.query(JobRole).filter(
            or_(
                func.lower(JobRole.job_role_name).like(pattern),
                func.lower(JobRole.description).like(pattern),
                func.lower(JobRole.location).like(pattern),
                func.lower(JobRole.capability).like(pattern),
            )
        )
        total = query.count()
        job_roles = (
            query.order_by(JobRole.job_role_name.asc(), JobRole.id.asc())
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )
        return job_roles, total

    def get_job_role(self, job_role_id: int) -> JobRole:
        job_role = self.db.get(JobRole, job_role_id)
        if job_role is None:
            raise JobRoleError("Job role not found", status_code=404)
        return job_role

    def create_job_role(self, data: dict[str, Any]) -> JobRole:
        data = _normalize_status(data)
        now = utcnow()
        job_role = JobRole(**data, created_at=now, updated_at=now)
        self.db.add(job_role)
        self.db.commit()
        self.db.refresh(job_role)
        logger.info(f"Created job role {job_role.id}: {job_role.job_role_name}")
        return job_role

    def update_job_role(self, job_role_id: int, changes: dict[str, Any]) -> JobRole:
        job_role = self.get_job_role(job_role_id)
        if not changes:
            raise JobRoleError("No fields to update")
        changes = _normalize_status(changes)

        for field, value in changes.items():
            setattr(job_role, field, value)
        job_role.updated_at = utcnow()

        self.db.commit()
        self.db.refresh(job_role)
        logger.info(f"Updated job role {job_role_id}: {sorted(changes)}")
        return job_role

    def delete_job_role(self, job_role_id: int) -> None:
        """Delete a role together with its applications."""
        job_role = self.get_job_role(job_role_id)
        self.db.delete(job_role)
        self.db.commit()
        logger.info(f"Deleted job role {job_role_id}")

    def get_applications_for_role(self, job_role_id: int) -> list[JobApplication]:
        self.get_job_role(job_role_id)
        return (
            self.db.query(JobApplication)
            .filter(JobApplication.job_role_id == job_role_id)
            .order_by(JobApplication.submitted_at.desc(), JobApplication.id.desc())
            .all()
        )
