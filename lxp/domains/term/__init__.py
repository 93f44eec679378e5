# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Term domain package.

This package provides term management functionality including:
- The fixed table of periods legal for each term type
- Term date order and academic cycle containment checks
- Term CRUD operations
"""

from lxp.domains.term.errors import (
    InvalidDateRangeError,
    InvalidPeriodError,
    OutOfCycleRangeError,
    TermConflictError,
    TermDependencyError,
    TermNotFoundError,
    TermServiceError,
    TermValidationError,
)
from lxp.domains.term.service import TermService
from lxp.domains.term.validation import (
    VALID_PERIODS_BY_TYPE,
    legal_periods,
    validate_term_dates,
    validate_term_type_and_period,
    validate_within_cycle,
)

__all__ = [
    "TermService",
    "TermServiceError",
    "TermNotFoundError",
    "TermConflictError",
    "TermDependencyError",
    "TermValidationError",
    "InvalidPeriodError",
    "InvalidDateRangeError",
    "OutOfCycleRangeError",
    "VALID_PERIODS_BY_TYPE",
    "legal_periods",
    "validate_term_type_and_period",
    "validate_term_dates",
    "validate_within_cycle",
]
