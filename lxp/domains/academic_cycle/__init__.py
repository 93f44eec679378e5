# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic cycle domain package."""

from lxp.domains.academic_cycle.service import (
    AcademicCycleConflictError,
    AcademicCycleNotFoundError,
    AcademicCycleService,
    AcademicCycleServiceError,
)

__all__ = [
    "AcademicCycleService",
    "AcademicCycleServiceError",
    "AcademicCycleNotFoundError",
    "AcademicCycleConflictError",
]
