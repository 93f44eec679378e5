# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Term domain exceptions.

The three validation errors are also raised for academic cycle date
checks, so callers handle one family of errors for both.
"""


class TermServiceError(Exception):
    """Base exception for term service errors."""

    pass


class TermNotFoundError(TermServiceError):
    """Raised when a term, or an entity a term refers to, is not found."""

    pass


class TermConflictError(TermServiceError):
    """Raised when a term code is already in use."""

    pass


class TermDependencyError(TermServiceError):
    """Raised when a term cannot be deleted because records depend on it."""

    pass


class TermValidationError(TermServiceError):
    """Base exception for deterministic term/cycle validation failures."""

    pass


class InvalidPeriodError(TermValidationError):
    """Raised when a term period is not legal for the term type."""

    def __init__(self, term_type: object, term_period: object) -> None:
        self.term_type = term_type
        self.term_period = term_period
        super().__init__(
            f'Invalid period "{_value(term_period)}" for term type "{_value(term_type)}"'
        )


class InvalidDateRangeError(TermValidationError):
    """Raised when a start date is not strictly before its end date."""

    def __init__(self, start_date: object, end_date: object, subject: str = "Term") -> None:
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(f"{subject} end date must be after start date")


class OutOfCycleRangeError(TermValidationError):
    """Raised when a term's dates fall outside its academic cycle."""

    def __init__(
        self,
        start_date: object,
        end_date: object,
        cycle_start: object,
        cycle_end: object,
    ) -> None:
        self.start_date = start_date
        self.end_date = end_date
        self.cycle_start = cycle_start
        self.cycle_end = cycle_end
        super().__init__(
            f"Term dates {start_date} to {end_date} must fall within the "
            f"academic cycle ({cycle_start} to {cycle_end})"
        )


def _value(item: object) -> object:
    return getattr(item, "value", item)
