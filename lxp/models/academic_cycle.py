# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic cycle request and response models.

Date ordering is not checked here: the service raises InvalidDateRangeError
so that the API reports it the same way for cycles and terms.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from lxp.core.enums import AcademicCycleType, SystemStatus


class AcademicCycleCreateRequest(BaseModel):
    """Request to create an academic cycle."""

    code: str = Field(min_length=1, max_length=50, description="Unique cycle code")
    name: str = Field(min_length=1, max_length=200, description="Display name")
    description: str | None = Field(default=None, description="Optional description")
    type: AcademicCycleType = Field(
        default=AcademicCycleType.ANNUAL,
        description="Cycle type",
    )
    start_date: date = Field(description="First day of the cycle")
    end_date: date = Field(description="Last day of the cycle")


class AcademicCycleUpdateRequest(BaseModel):
    """Partial update of an academic cycle."""

    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    type: AcademicCycleType | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: SystemStatus | None = None


class AcademicCycleFilters(BaseModel):
    """Filters for listing academic cycles."""

    type: AcademicCycleType | None = None
    status: SystemStatus | None = None
    search: str | None = Field(default=None, description="Matches name or code")


class AcademicCycleSummary(BaseModel):
    """Academic cycle list item."""

    id: UUID
    code: str
    name: str
    type: AcademicCycleType
    start_date: date
    end_date: date
    status: SystemStatus
    duration_days: int = Field(description="Length of the cycle in days")


class AcademicCycleResponse(AcademicCycleSummary):
    """Academic cycle details."""

    description: str | None = None
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime
    term_count: int = Field(default=0, description="Number of terms in the cycle")


class AcademicCycleListResponse(BaseModel):
    """Paginated academic cycle list."""

    items: list[AcademicCycleSummary]
    total: int
    page: int
    page_size: int
