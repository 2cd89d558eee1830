from __future__ import annotations

import datetime
import typing

from pydantic import BaseModel, Field, field_validator

from jobapp.models import JobRoleStatus
from jobapp.schemas.common_schema import ORMSchema, PaginationMeta, UTCDateTime
from jobapp.utils.dates import to_naive_utc


# --- Requests ---

class JobRoleCreate(BaseModel):
    job_role_name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    responsibilities: str = Field(..., min_length=1)
    job_spec_link: str = Field(..., min_length=1, max_length=500)
    location: str = Field(..., min_length=1, max_length=100)
    capability: str = Field(..., min_length=1, max_length=100)
    band: str = Field(..., min_length=1, max_length=50)
    closing_date: datetime.datetime
    status: JobRoleStatus = JobRoleStatus.ACTIVE
    number_of_open_positions: int = Field(1, ge=0)

    closing_date_utc = field_validator("closing_date")(to_naive_utc)


class JobRoleUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""

    job_role_name: typing.Optional[str] = Field(None, min_length=1, max_length=200)
    description: typing.Optional[str] = Field(None, min_length=1)
    responsibilities: typing.Optional[str] = Field(None, min_length=1)
    job_spec_link: typing.Optional[str] = Field(None, min_length=1, max_length=500)
    location: typing.Optional[str] = Field(None, min_length=1, max_length=100)
    capability: typing.Optional[str] = Field(None, min_length=1, max_length=100)
    band: typing.Optional[str] = Field(None, min_length=1, max_length=50)
    closing_date: typing.Optional[datetime.datetime] = None
    status: typing.Optional[JobRoleStatus] = None
    number_of_open_positions: typing.Optional[int] = Field(None, ge=0)

    closing_date_utc = field_validator("closing_date")(to_naive_utc)


# --- Responses ---

class JobRoleOut(ORMSchema):
    id: int
    job_role_name: str
    description: str
    responsibilities: str
    job_spec_link: str
    location: str
    capability: str
    band: str
    closing_date: UTCDateTime
    status: str
    number_of_open_positions: int
    created_at: UTCDateTime
    updated_at: UTCDateTime


class JobRoleListResponse(BaseModel):
    job_roles: list[JobRoleOut]
    pagination: PaginationMeta


class JobRoleSearchResponse(BaseModel):
    search_term: str
    job_roles: list[JobRoleOut]
    pagination: PaginationMeta
