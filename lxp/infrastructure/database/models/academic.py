# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic calendar models: courses, academic cycles, terms and classes."""

from datetime import date

from sqlalchemy import Date, Enum, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lxp.core.enums import AcademicCycleType, SystemStatus, TermPeriod, TermType
from lxp.infrastructure.database.models.base import (
    Base,
    SoftDeleteMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class Course(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Course offered by the institution. Terms are scheduled per course."""

    __tablename__ = "courses"

    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[SystemStatus] = mapped_column(
        Enum(SystemStatus, native_enum=False, length=20),
        nullable=False,
        default=SystemStatus.ACTIVE,
    )


class AcademicCycle(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Top-level academic calendar period, e.g. an academic year."""

    __tablename__ = "academic_cycles"

    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[AcademicCycleType] = mapped_column(
        Enum(AcademicCycleType, native_enum=False, length=20),
        nullable=False,
        default=AcademicCycleType.ANNUAL,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[SystemStatus] = mapped_column(
        Enum(SystemStatus, native_enum=False, length=20),
        nullable=False,
        default=SystemStatus.ACTIVE,
    )
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    terms: Mapped[list["Term"]] = relationship(back_populates="academic_cycle")

    __table_args__ = (
        Index("ix_academic_cycles_start_date", "start_date"),
    )

    def contains(self, start: date, end: date) -> bool:
        """Check whether [start, end] lies inside this cycle's range."""
        return self.start_date <= start and end <= self.end_date


class Term(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Sub-period of an academic cycle assigned to a course."""

    __tablename__ = "terms"

    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    term_type: Mapped[TermType] = mapped_column(
        Enum(TermType, native_enum=False, length=20),
        nullable=False,
    )
    term_period: Mapped[TermPeriod] = mapped_column(
        Enum(TermPeriod, native_enum=False, length=20),
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    course_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("courses.id", ondelete="RESTRICT"),
        nullable=False,
    )
    academic_cycle_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("academic_cycles.id", ondelete="RESTRICT"),
        nullable=False,
    )
    status: Mapped[SystemStatus] = mapped_column(
        Enum(SystemStatus, native_enum=False, length=20),
        nullable=False,
        default=SystemStatus.ACTIVE,
    )

    academic_cycle: Mapped[AcademicCycle] = relationship(back_populates="terms")

    __table_args__ = (
        Index("ix_terms_course_id", "course_id"),
        Index("ix_terms_academic_cycle_id", "academic_cycle_id"),
    )


class Class(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Class section running a course during a term."""

    __tablename__ = "classes"

    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    course_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("courses.id", ondelete="RESTRICT"),
        nullable=False,
    )
    term_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("terms.id", ondelete="RESTRICT"),
        nullable=False,
    )
    status: Mapped[SystemStatus] = mapped_column(
        Enum(SystemStatus, native_enum=False, length=20),
        nullable=False,
        default=SystemStatus.ACTIVE,
    )

    __table_args__ = (
        Index("ix_classes_term_id", "term_id"),
    )
