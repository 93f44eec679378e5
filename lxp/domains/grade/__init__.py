# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade domain package.

This package provides grading functionality including:
- Weighted final grade calculation and letter grade lookup
- Grade book and student grade management
- Class final grades and student progress
"""

from lxp.domains.grade.aggregation import (
    DEFAULT_WEIGHT,
    FINAL_GRADE_PLACES,
    calculate_final_grade,
    letter_grade_for,
    round_grade,
)
from lxp.domains.grade.service import (
    GradeBookConflictError,
    GradeBookNotFoundError,
    GradeService,
    GradeServiceError,
    StudentGradeConflictError,
    StudentGradeNotFoundError,
    StudentNotFoundError,
)

__all__ = [
    "DEFAULT_WEIGHT",
    "FINAL_GRADE_PLACES",
    "calculate_final_grade",
    "letter_grade_for",
    "round_grade",
    "GradeService",
    "GradeServiceError",
    "GradeBookNotFoundError",
    "GradeBookConflictError",
    "StudentNotFoundError",
    "StudentGradeNotFoundError",
    "StudentGradeConflictError",
]
