# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading scales.

Creates grading_scales and lets a grade book reference one.

Revision ID: 002_grading_scales
Revises: 001_initial_schema
Create Date: 2025-03-10
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002_grading_scales"
down_revision: Union[str, None] = "001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create grading_scales and grade_books.grading_scale_id."""
    op.create_table(
        "grading_scales",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("type", sa.String(20), nullable=False, server_default="PERCENTAGE"),
        sa.Column("min_score", sa.Float, nullable=False, server_default="0"),
        sa.Column("max_score", sa.Float, nullable=False, server_default="100"),
        sa.Column("ranges", sa.JSON, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("created_by_id", sa.String(100), nullable=True),
        sa.Column("updated_by_id", sa.String(100), nullable=True),
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
    )

    op.add_column(
        "grade_books",
        sa.Column("grading_scale_id", sa.Uuid(as_uuid=False), nullable=True),
    )
    op.create_foreign_key(
        "fk_grade_books_grading_scale_id",
        "grade_books",
        "grading_scales",
        ["grading_scale_id"],
        ["id"],
        ondelete="SET NULL",
    )


def downgrade() -> None:
    """Drop grading scales."""
    op.drop_constraint("fk_grade_books_grading_scale_id", "grade_books", type_="foreignkey")
    op.drop_column("grade_books", "grading_scale_id")
    op.drop_table("grading_scales")
