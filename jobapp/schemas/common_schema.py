from __future__ import annotations

import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer

from jobapp.utils.dates import to_iso
from jobapp.utils.pagination import PaginationParams, calculate_pagination_metadata


class ORMSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Stored naive; serialized as explicit UTC
UTCDateTime = Annotated[datetime.datetime, PlainSerializer(to_iso, return_type=str)]


class PaginationMeta(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    limit: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, total_count: int, params: PaginationParams) -> "PaginationMeta":
        return cls(**calculate_pagination_metadata(total_count, params.page, params.limit))


class MessageResponse(BaseModel):
    success: bool = True
    message: str
