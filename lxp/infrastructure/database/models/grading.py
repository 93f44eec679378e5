# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading models: students, grading scales, grade books and student grades."""

from typing import Any

from sqlalchemy import (
    JSON,
    Enum,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lxp.core.enums import GradingScaleType, SystemStatus
from lxp.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class Student(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Student profile linked to a platform user."""

    __tablename__ = "students"

    user_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    enrollment_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)


class GradingScale(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Score bounds and the grade ranges that map scores to letter grades.

    ranges holds [{"grade", "min_score", "max_score", "gpa_value"}].
    """

    __tablename__ = "grading_scales"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[GradingScaleType] = mapped_column(
        Enum(GradingScaleType, native_enum=False, length=20),
        nullable=False,
        default=GradingScaleType.PERCENTAGE,
    )
    min_score: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    max_score: Mapped[float] = mapped_column(Float, nullable=False, default=100)
    ranges: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[SystemStatus] = mapped_column(
        Enum(SystemStatus, native_enum=False, length=20),
        nullable=False,
        default=SystemStatus.ACTIVE,
    )
    created_by_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    updated_by_id: Mapped[str | None] = mapped_column(String(100), nullable=True)


class GradeBook(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Weighted grading configuration for one class within one term.

    calculation_rules holds {"weights": {assessment_id: weight}}. The optional
    grading scale turns computed final grades into letter grades.
    """

    __tablename__ = "grade_books"

    class_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
    )
    term_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("terms.id", ondelete="RESTRICT"),
        nullable=False,
    )
    calculation_rules: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    grading_scale_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("grading_scales.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_by_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    updated_by_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    student_grades: Mapped[list["StudentGrade"]] = relationship(
        back_populates="grade_book",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("class_id", "term_id", name="uq_grade_books_class_term"),
        Index("ix_grade_books_term_id", "term_id"),
    )

    @property
    def weights(self) -> dict[str, float]:
        """Assessment weights from the calculation rules."""
        return dict((self.calculation_rules or {}).get("weights") or {})


class StudentGrade(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A student's per-assessment scores and final grade within a grade book."""

    __tablename__ = "student_grades"

    grade_book_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("grade_books.id", ondelete="CASCADE"),
        nullable=False,
    )
    student_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    assessment_grades: Mapped[dict[str, float]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    final_grade: Mapped[float | None] = mapped_column(Float, nullable=True)
    letter_grade: Mapped[str | None] = mapped_column(String(5), nullable=True)
    attendance: Mapped[float | None] = mapped_column(Float, nullable=True)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[SystemStatus] = mapped_column(
        Enum(SystemStatus, native_enum=False, length=20),
        nullable=False,
        default=SystemStatus.ACTIVE,
    )

    grade_book: Mapped[GradeBook] = relationship(back_populates="student_grades")

    __table_args__ = (
        UniqueConstraint(
            "grade_book_id",
            "student_id",
            name="uq_student_grades_grade_book_student",
        ),
        Index("ix_student_grades_student_id", "student_id"),
    )
