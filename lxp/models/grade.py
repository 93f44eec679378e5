# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade book and student grade request/response models."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field

from lxp.core.enums import SystemStatus

MAX_SCORE = 10_000
MAX_WEIGHT = 1_000

Score = Annotated[float, Field(ge=0, le=MAX_SCORE, allow_inf_nan=False)]
Weight = Annotated[float, Field(ge=0, le=MAX_WEIGHT, allow_inf_nan=False)]


class CalculationRules(BaseModel):
    """Weighted grading rules of a grade book.

    Assessments missing from weights count with weight 1.
    """

    weights: dict[str, Weight] = Field(
        default_factory=dict,
        description="Weight per assessment id",
    )


class GradeBookCreateRequest(BaseModel):
    """Request to create a grade book for a class in a term."""

    class_id: UUID
    term_id: UUID
    calculation_rules: CalculationRules = Field(default_factory=CalculationRules)
    grading_scale_id: UUID | None = Field(
        default=None,
        description="Grading scale used to derive letter grades",
    )


class GradeBookUpdateRequest(BaseModel):
    """Replace the calculation rules or grading scale of a grade book.

    Omitted fields keep their current value. An explicit null
    grading_scale_id detaches the scale.
    """

    calculation_rules: CalculationRules | None = None
    grading_scale_id: UUID | None = None


class GradeBookSummary(BaseModel):
    """Grade book list item."""

    id: UUID
    class_id: UUID
    term_id: UUID
    calculation_rules: CalculationRules
    grading_scale_id: UUID | None = None
    created_at: datetime


class StudentGradeResponse(BaseModel):
    """A student's grade record."""

    id: UUID
    grade_book_id: UUID
    student_id: UUID
    assessment_grades: dict[str, float]
    final_grade: float | None = None
    letter_grade: str | None = None
    attendance: float | None = None
    comments: str | None = None
    status: SystemStatus


class GradeBookResponse(GradeBookSummary):
    """Grade book details including student grades."""

    created_by_id: str | None = None
    updated_by_id: str | None = None
    student_grades: list[StudentGradeResponse] = Field(default_factory=list)


class GradeBookListResponse(BaseModel):
    """Paginated grade book list."""

    items: list[GradeBookSummary]
    total: int
    page: int
    page_size: int


class StudentGradeCreateRequest(BaseModel):
    """Record a student's grades in a grade book.

    When final_grade is omitted it is computed from the grade book weights.
    """

    student_id: UUID
    assessment_grades: dict[str, Score] = Field(default_factory=dict)
    final_grade: float | None = Field(default=None, ge=0, le=MAX_SCORE, allow_inf_nan=False)
    letter_grade: str | None = Field(default=None, max_length=5)
    attendance: float | None = Field(default=None, ge=0, le=100)
    comments: str | None = None


class StudentGradeUpdateRequest(BaseModel):
    """Partial update of a student's grade record."""

    assessment_grades: dict[str, Score] | None = None
    final_grade: float | None = Field(default=None, ge=0, le=MAX_SCORE, allow_inf_nan=False)
    letter_grade: str | None = Field(default=None, max_length=5)
    attendance: float | None = Field(default=None, ge=0, le=100)
    comments: str | None = None
    status: SystemStatus | None = None


class StudentGradeFilters(BaseModel):
    """Filters for listing student grades."""

    grade_book_id: UUID | None = None
    student_id: UUID | None = None
    status: SystemStatus | None = None
    min_final_grade: float | None = Field(default=None, description="Lower bound, inclusive")


class StudentGradeListResponse(BaseModel):
    """Paginated student grade list."""

    items: list[StudentGradeResponse]
    total: int
    page: int
    page_size: int


class StudentFinalGrade(BaseModel):
    """Computed final grade of one student."""

    student_id: UUID
    final_grade: float
    letter_grade: str | None = None


class GradeBookFinalGrades(BaseModel):
    """Computed final grades of every student in one grade book."""

    grade_book_id: UUID
    grades: list[StudentFinalGrade]


class StudentProgressEntry(BaseModel):
    """A student's grade record within one grade book of a class."""

    grade_book_id: UUID
    term_id: UUID
    grades: list[StudentGradeResponse]
