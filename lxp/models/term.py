# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Term request and response models.

Type/period legality, date ordering and cycle containment are domain rules
enforced by TermService, not schema rules.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from lxp.core.enums import SystemStatus, TermPeriod, TermType


class TermCreateRequest(BaseModel):
    """Request to create a term."""

    code: str = Field(min_length=1, max_length=50, description="Unique term code")
    name: str = Field(min_length=1, max_length=200, description="Display name")
    description: str | None = None
    term_type: TermType
    term_period: TermPeriod
    start_date: date
    end_date: date
    course_id: UUID
    academic_cycle_id: UUID


class TermUpdateRequest(BaseModel):
    """Partial update of a term."""

    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    term_type: TermType | None = None
    term_period: TermPeriod | None = None
    start_date: date | None = None
    end_date: date | None = None
    course_id: UUID | None = None
    academic_cycle_id: UUID | None = None
    status: SystemStatus | None = None


class TermFilters(BaseModel):
    """Filters for listing terms."""

    course_id: UUID | None = None
    academic_cycle_id: UUID | None = None
    term_type: TermType | None = None
    term_period: TermPeriod | None = None
    status: SystemStatus | None = None
    search: str | None = Field(default=None, description="Matches name or code")


class TermResponse(BaseModel):
    """Term details."""

    id: UUID
    code: str
    name: str
    description: str | None = None
    term_type: TermType
    term_period: TermPeriod
    start_date: date
    end_date: date
    course_id: UUID
    academic_cycle_id: UUID
    status: SystemStatus
    created_at: datetime


class TermListResponse(BaseModel):
    """Paginated term list."""

    items: list[TermResponse]
    total: int
    page: int
    page_size: int
