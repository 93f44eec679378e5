# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial academic core schema.

Creates courses, academic cycles, terms, classes, students, grade books
and student grades.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-02-03
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True)


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def _status_column() -> sa.Column:
    return sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE")


def upgrade() -> None:
    """Create academic core tables."""
    op.create_table(
        "courses",
        _id_column(),
        sa.Column("code", sa.String(50), unique=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        _status_column(),
        *_timestamp_columns(),
    )

    op.create_table(
        "academic_cycles",
        _id_column(),
        sa.Column("code", sa.String(50), unique=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("type", sa.String(20), nullable=False, server_default="ANNUAL"),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        _status_column(),
        sa.Column("created_by", sa.String(100), nullable=True),
        sa.Column("updated_by", sa.String(100), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamp_columns(),
        sa.CheckConstraint("start_date < end_date", name="ck_academic_cycles_date_order"),
    )
    op.create_index("ix_academic_cycles_start_date", "academic_cycles", ["start_date"])

    op.create_table(
        "terms",
        _id_column(),
        sa.Column("code", sa.String(50), unique=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("term_type", sa.String(20), nullable=False),
        sa.Column("term_period", sa.String(20), nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column(
            "course_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("courses.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "academic_cycle_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("academic_cycles.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        _status_column(),
        *_timestamp_columns(),
        sa.CheckConstraint("start_date < end_date", name="ck_terms_date_order"),
    )
    op.create_index("ix_terms_course_id", "terms", ["course_id"])
    op.create_index("ix_terms_academic_cycle_id", "terms", ["academic_cycle_id"])

    op.create_table(
        "classes",
        _id_column(),
        sa.Column("code", sa.String(50), unique=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "course_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("courses.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "term_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("terms.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        _status_column(),
        *_timestamp_columns(),
    )
    op.create_index("ix_classes_term_id", "classes", ["term_id"])

    op.create_table(
        "students",
        _id_column(),
        sa.Column("user_id", sa.String(100), unique=True, nullable=False),
        sa.Column("enrollment_number", sa.String(50), unique=True, nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        *_timestamp_columns(),
    )

    op.create_table(
        "grade_books",
        _id_column(),
        sa.Column(
            "class_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("classes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "term_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("terms.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("calculation_rules", sa.JSON, nullable=False),
        sa.Column("created_by_id", sa.String(100), nullable=True),
        sa.Column("updated_by_id", sa.String(100), nullable=True),
        *_timestamp_columns(),
        sa.UniqueConstraint("class_id", "term_id", name="uq_grade_books_class_term"),
    )
    op.create_index("ix_grade_books_term_id", "grade_books", ["term_id"])

    op.create_table(
        "student_grades",
        _id_column(),
        sa.Column(
            "grade_book_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("grade_books.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "student_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("students.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("assessment_grades", sa.JSON, nullable=False),
        sa.Column("final_grade", sa.Float, nullable=True),
        sa.Column("letter_grade", sa.String(5), nullable=True),
        sa.Column("attendance", sa.Float, nullable=True),
        sa.Column("comments", sa.Text, nullable=True),
        _status_column(),
        *_timestamp_columns(),
        sa.UniqueConstraint(
            "grade_book_id",
            "student_id",
            name="uq_student_grades_grade_book_student",
        ),
    )
    op.create_index("ix_student_grades_student_id", "student_grades", ["student_id"])


def downgrade() -> None:
    """Drop academic core tables."""
    op.drop_table("student_grades")
    op.drop_table("grade_books")
    op.drop_table("students")
    op.drop_table("classes")
    op.drop_table("terms")
    op.drop_table("academic_cycles")
    op.drop_table("courses")
