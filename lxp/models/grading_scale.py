# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading scale request and response models.

Per-range bounds are checked here; how the ranges fit together and within
the scale bounds is checked by GradingScaleService, since an update may
change only some of them.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from lxp.core.enums import GradingScaleType, SystemStatus
from lxp.models.grade import MAX_SCORE


class GradeRange(BaseModel):
    """Score interval mapped to one grade."""

    grade: str = Field(min_length=1, max_length=5, description="Letter grade, e.g. A")
    min_score: float = Field(ge=0, le=MAX_SCORE, allow_inf_nan=False)
    max_score: float = Field(ge=0, le=MAX_SCORE, allow_inf_nan=False)
    gpa_value: float | None = Field(default=None, ge=0, le=10, allow_inf_nan=False)

    @model_validator(mode="after")
    def check_bounds(self) -> "GradeRange":
        if self.min_score > self.max_score:
            raise ValueError("min_score must not exceed max_score")
        return self


def default_ranges() -> list[GradeRange]:
    """A-F on a 0-100 percentage scale with 4.0 GPA values."""
    return [
        GradeRange(grade="A", min_score=90, max_score=100, gpa_value=4.0),
        GradeRange(grade="B", min_score=80, max_score=89, gpa_value=3.0),
        GradeRange(grade="C", min_score=70, max_score=79, gpa_value=2.0),
        GradeRange(grade="D", min_score=60, max_score=69, gpa_value=1.0),
        GradeRange(grade="F", min_score=0, max_score=59, gpa_value=0.0),
    ]


class GradingScaleCreateRequest(BaseModel):
    """Request to create a grading scale."""

    name: str = Field(min_length=1, max_length=100)
    type: GradingScaleType = GradingScaleType.PERCENTAGE
    min_score: float = Field(default=0, ge=0, le=MAX_SCORE, allow_inf_nan=False)
    max_score: float = Field(default=100, ge=0, le=MAX_SCORE, allow_inf_nan=False)
    status: SystemStatus = SystemStatus.ACTIVE
    ranges: list[GradeRange] = Field(default_factory=default_ranges, min_length=1)


class GradingScaleUpdateRequest(BaseModel):
    """Partial update of a grading scale."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    type: GradingScaleType | None = None
    min_score: float | None = Field(default=None, ge=0, le=MAX_SCORE, allow_inf_nan=False)
    max_score: float | None = Field(default=None, ge=0, le=MAX_SCORE, allow_inf_nan=False)
    status: SystemStatus | None = None
    ranges: list[GradeRange] | None = Field(default=None, min_length=1)


class GradingScaleFilters(BaseModel):
    """Filters for listing grading scales."""

    status: SystemStatus | None = None
    search: str | None = Field(default=None, description="Matches name, case-insensitive")


class GradingScaleResponse(BaseModel):
    """Grading scale details."""

    id: UUID
    name: str
    type: GradingScaleType
    min_score: float
    max_score: float
    status: SystemStatus
    ranges: list[GradeRange]
    created_by_id: str | None = None
    updated_by_id: str | None = None
    created_at: datetime


class GradingScaleListResponse(BaseModel):
    """Paginated grading scale list."""

    items: list[GradingScaleResponse]
    total: int
    page: int
    page_size: int
    has_more: bool
