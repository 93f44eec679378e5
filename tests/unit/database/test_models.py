# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for database models.

Tests model definitions, constraints, and helper methods.
"""

from datetime import date, datetime, timezone

from lxp.infrastructure.database.models import (
    AcademicCycle,
    Base,
    Class,
    Course,
    GradeBook,
    GradingScale,
    SoftDeleteMixin,
    Student,
    StudentGrade,
    Term,
    TimestampMixin,
)


def _unique_constraint_names(model) -> set[str]:
    return {
        constraint.name
        for constraint in model.__table__.constraints
        if constraint.__class__.__name__ == "UniqueConstraint"
    }


class TestBase:
    """Test base model functionality."""

    def test_base_inherits_declarative_base(self):
        """Verify Base is a declarative base."""
        assert hasattr(Base, "metadata")
        assert hasattr(Base, "registry")

    def test_mixins_have_columns(self):
        assert hasattr(TimestampMixin, "created_at")
        assert hasattr(TimestampMixin, "updated_at")
        assert hasattr(SoftDeleteMixin, "deleted_at")

    def test_all_tables_registered(self):
        assert set(Base.metadata.tables) >= {
            "courses",
            "academic_cycles",
            "terms",
            "classes",
            "students",
            "grading_scales",
            "grade_books",
            "student_grades",
        }


class TestAcademicModels:
    """Test academic calendar models."""

    def test_table_names(self):
        assert Course.__tablename__ == "courses"
        assert AcademicCycle.__tablename__ == "academic_cycles"
        assert Term.__tablename__ == "terms"
        assert Class.__tablename__ == "classes"

    def test_cycle_contains(self):
        cycle = AcademicCycle(
            code="AY-2024",
            name="Academic Year 2024",
            start_date=date(2024, 9, 1),
            end_date=date(2025, 6, 30),
        )

        assert cycle.contains(date(2024, 9, 1), date(2025, 6, 30))
        assert cycle.contains(date(2024, 10, 1), date(2024, 12, 31))
        assert not cycle.contains(date(2024, 8, 31), date(2024, 12, 31))
        assert not cycle.contains(date(2025, 1, 1), date(2025, 7, 1))

    def test_cycle_is_deleted(self):
        cycle = AcademicCycle(code="AY", name="AY")
        assert not cycle.is_deleted

        cycle.deleted_at = datetime.now(timezone.utc)
        assert cycle.is_deleted

    def test_codes_are_unique(self):
        assert AcademicCycle.__table__.c.code.unique
        assert Term.__table__.c.code.unique

    def test_term_references_cycle_and_course(self):
        foreign_tables = {fk.column.table.name for fk in Term.__table__.foreign_keys}
        assert foreign_tables == {"courses", "academic_cycles"}


class TestGradingModels:
    """Test grading models."""

    def test_table_names(self):
        assert Student.__tablename__ == "students"
        assert GradeBook.__tablename__ == "grade_books"
        assert StudentGrade.__tablename__ == "student_grades"

    def test_grade_book_weights(self):
        book = GradeBook(calculation_rules={"weights": {"exam": 0.6, "homework": 0.4}})

        assert book.weights == {"exam": 0.6, "homework": 0.4}

    def test_grade_book_weights_missing(self):
        assert GradeBook(calculation_rules={}).weights == {}
        assert GradeBook(calculation_rules={"weights": None}).weights == {}

    def test_grade_book_weights_returns_copy(self):
        book = GradeBook(calculation_rules={"weights": {"exam": 1.0}})

        book.weights["quiz"] = 2.0

        assert book.calculation_rules == {"weights": {"exam": 1.0}}

    def test_one_grade_book_per_class_and_term(self):
        assert "uq_grade_books_class_term" in _unique_constraint_names(GradeBook)

    def test_one_grade_per_student_and_book(self):
        assert "uq_student_grades_grade_book_student" in _unique_constraint_names(StudentGrade)

    def test_grading_scale_table(self):
        assert GradingScale.__tablename__ == "grading_scales"
        assert GradingScale.__table__.c.name.type.length == 100

    def test_grade_book_scale_is_optional(self):
        column = GradeBook.__table__.c.grading_scale_id

        assert column.nullable
        (foreign_key,) = column.foreign_keys
        assert foreign_key.column.table.name == "grading_scales"
        assert foreign_key.ondelete == "SET NULL"
