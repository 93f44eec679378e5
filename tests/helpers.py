# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Test builders.

Mocked SQLAlchemy execute() results for service tests, and response
models for API tests.
"""

from datetime import date, datetime, timezone
from typing import Any
from unittest.mock import MagicMock
from uuid import uuid4

from lxp.core.enums import (
    AcademicCycleType,
    GradingScaleType,
    SystemStatus,
    TermPeriod,
    TermType,
)
from lxp.models.academic_cycle import AcademicCycleResponse, AcademicCycleSummary
from lxp.models.grade import CalculationRules, GradeBookResponse, StudentGradeResponse
from lxp.models.grading_scale import GradingScaleResponse, default_ranges
from lxp.models.term import TermResponse


def scalar_result(value: Any) -> MagicMock:
    """Build an execute() result whose scalar lookups return value."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar.return_value = value
    result.scalars.return_value.first.return_value = value
    return result


def scalars_result(values: list[Any]) -> MagicMock:
    """Build an execute() result whose scalars().all() returns values."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    result.scalars.return_value.first.return_value = values[0] if values else None
    return result


def make_cycle_response(**overrides) -> AcademicCycleResponse:
    data = {
        "id": uuid4(),
        "code": "AY-2024",
        "name": "Academic Year 2024-2025",
        "type": AcademicCycleType.ANNUAL,
        "start_date": date(2024, 9, 1),
        "end_date": date(2025, 6, 30),
        "status": SystemStatus.ACTIVE,
        "duration_days": 302,
        "created_at": datetime.now(timezone.utc),
        "term_count": 0,
    }
    data.update(overrides)
    return AcademicCycleResponse(**data)


def make_cycle_summary(**overrides) -> AcademicCycleSummary:
    response = make_cycle_response(**overrides)
    return AcademicCycleSummary(**response.model_dump(include=set(AcademicCycleSummary.model_fields)))


def make_term_response(**overrides) -> TermResponse:
    data = {
        "id": uuid4(),
        "code": "FALL-2024",
        "name": "Fall 2024",
        "term_type": TermType.SEMESTER,
        "term_period": TermPeriod.FALL,
        "start_date": date(2024, 9, 1),
        "end_date": date(2025, 1, 31),
        "course_id": uuid4(),
        "academic_cycle_id": uuid4(),
        "status": SystemStatus.ACTIVE,
        "created_at": datetime.now(timezone.utc),
    }
    data.update(overrides)
    return TermResponse(**data)


def make_student_grade_response(**overrides) -> StudentGradeResponse:
    data = {
        "id": uuid4(),
        "grade_book_id": uuid4(),
        "student_id": uuid4(),
        "assessment_grades": {"exam": 90.0, "homework": 80.0},
        "final_grade": 86.67,
        "status": SystemStatus.ACTIVE,
    }
    data.update(overrides)
    return StudentGradeResponse(**data)


def make_grade_book_response(**overrides) -> GradeBookResponse:
    data = {
        "id": uuid4(),
        "class_id": uuid4(),
        "term_id": uuid4(),
        "calculation_rules": CalculationRules(weights={"exam": 2, "homework": 1}),
        "created_at": datetime.now(timezone.utc),
    }
    data.update(overrides)
    return GradeBookResponse(**data)


def make_grading_scale_response(**overrides) -> GradingScaleResponse:
    data = {
        "id": uuid4(),
        "name": "Percentage A-F",
        "type": GradingScaleType.PERCENTAGE,
        "min_score": 0,
        "max_score": 100,
        "status": SystemStatus.ACTIVE,
        "ranges": default_ranges(),
        "created_at": datetime.now(timezone.utc),
    }
    data.update(overrides)
    return GradingScaleResponse(**data)
