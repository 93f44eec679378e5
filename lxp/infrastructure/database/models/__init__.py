# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Importing this package registers every table on Base.metadata, which is
what the Alembic environment relies on.
"""

from lxp.infrastructure.database.models.academic import (
    AcademicCycle,
    Class,
    Course,
    Term,
)
from lxp.infrastructure.database.models.base import (
    Base,
    SoftDeleteMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
    utc_now,
)
from lxp.infrastructure.database.models.grading import (
    GradeBook,
    GradingScale,
    Student,
    StudentGrade,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "SoftDeleteMixin",
    "UUIDPrimaryKeyMixin",
    "utc_now",
    "Course",
    "AcademicCycle",
    "Term",
    "Class",
    "Student",
    "GradingScale",
    "GradeBook",
    "StudentGrade",
]
