# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enumerations shared by the ORM models, DTOs and domain services."""

from enum import Enum


class SystemStatus(str, Enum):
    """Lifecycle status of administrative records."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ARCHIVED = "ARCHIVED"
    DELETED = "DELETED"


class AcademicCycleType(str, Enum):
    """Shape of an academic cycle."""

    ANNUAL = "ANNUAL"
    SEMESTER = "SEMESTER"
    TRIMESTER = "TRIMESTER"
    QUARTER = "QUARTER"
    CUSTOM = "CUSTOM"


class TermType(str, Enum):
    """How a course's academic cycle is divided into terms."""

    SEMESTER = "SEMESTER"
    TRIMESTER = "TRIMESTER"
    QUARTER = "QUARTER"
    THEME_BASED = "THEME_BASED"
    CUSTOM = "CUSTOM"


class TermPeriod(str, Enum):
    """Named position of a term within its cycle."""

    FALL = "FALL"
    SPRING = "SPRING"
    SUMMER = "SUMMER"
    WINTER = "WINTER"
    FIRST_QUARTER = "FIRST_QUARTER"
    SECOND_QUARTER = "SECOND_QUARTER"
    THIRD_QUARTER = "THIRD_QUARTER"
    FOURTH_QUARTER = "FOURTH_QUARTER"
    FIRST_TRIMESTER = "FIRST_TRIMESTER"
    SECOND_TRIMESTER = "SECOND_TRIMESTER"
    THIRD_TRIMESTER = "THIRD_TRIMESTER"
    THEME_UNIT = "THEME_UNIT"


class GradingScaleType(str, Enum):
    """How a grading scale expresses scores."""

    PERCENTAGE = "PERCENTAGE"
    POINTS = "POINTS"
    LETTER = "LETTER"
    GPA = "GPA"
    CUSTOM = "CUSTOM"


class UserType(str, Enum):
    """User types carried in access tokens."""

    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    SYSTEM_MANAGER = "SYSTEM_MANAGER"
    CAMPUS_ADMIN = "CAMPUS_ADMIN"
    CAMPUS_COORDINATOR = "CAMPUS_COORDINATOR"
    CAMPUS_TEACHER = "CAMPUS_TEACHER"
    CAMPUS_STUDENT = "CAMPUS_STUDENT"
