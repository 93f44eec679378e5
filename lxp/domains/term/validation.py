# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Term validity rules.

Pure functions with no I/O. Each check returns None on success and raises
a TermValidationError subclass on failure.

Example:
    >>> validate_term_type_and_period(TermType.SEMESTER, TermPeriod.WINTER)
    >>> validate_term_dates(date(2024, 1, 1), date(2024, 6, 1))
"""

from collections.abc import Mapping
from datetime import date
from types import MappingProxyType

from lxp.core.enums import TermPeriod, TermType
from lxp.domains.term.errors import (
    InvalidDateRangeError,
    InvalidPeriodError,
    OutOfCycleRangeError,
)

_SEMESTER_PERIODS = frozenset({
    TermPeriod.FALL,
    TermPeriod.SPRING,
    TermPeriod.SUMMER,
    TermPeriod.WINTER,
})

_QUARTER_PERIODS = frozenset({
    TermPeriod.FIRST_QUARTER,
    TermPeriod.SECOND_QUARTER,
    TermPeriod.THIRD_QUARTER,
    TermPeriod.FOURTH_QUARTER,
})

_TRIMESTER_PERIODS = frozenset({
    TermPeriod.FIRST_TRIMESTER,
    TermPeriod.SECOND_TRIMESTER,
    TermPeriod.THIRD_TRIMESTER,
})

_THEME_PERIODS = frozenset({TermPeriod.THEME_UNIT})

VALID_PERIODS_BY_TYPE: Mapping[TermType, frozenset[TermPeriod]] = MappingProxyType({
    TermType.SEMESTER: _SEMESTER_PERIODS,
    TermType.QUARTER: _QUARTER_PERIODS,
    TermType.TRIMESTER: _TRIMESTER_PERIODS,
    TermType.THEME_BASED: _THEME_PERIODS,
    TermType.CUSTOM: _SEMESTER_PERIODS | _QUARTER_PERIODS | _TRIMESTER_PERIODS | _THEME_PERIODS,
})


def legal_periods(term_type: TermType | str) -> frozenset[TermPeriod]:
    """Get the periods legal for a term type.

    Args:
        term_type: Term type, as enum or raw value.

    Returns:
        The legal periods; empty for an unknown type.
    """
    try:
        return VALID_PERIODS_BY_TYPE[TermType(term_type)]
    except ValueError:
        return frozenset()


def validate_term_type_and_period(
    term_type: TermType | str,
    term_period: TermPeriod | str,
) -> None:
    """Check that a period is legal for a term type.

    Args:
        term_type: Term type.
        term_period: Term period.

    Raises:
        InvalidPeriodError: If the period is not in the legal set for the type.
    """
    try:
        period = TermPeriod(term_period)
    except ValueError:
        raise InvalidPeriodError(term_type, term_period)

    if period not in legal_periods(term_type):
        raise InvalidPeriodError(term_type, term_period)


def validate_term_dates(start_date: date, end_date: date, subject: str = "Term") -> None:
    """Check that a date range is non-empty.

    Args:
        start_date: First day.
        end_date: Last day.
        subject: Name used in the error message.

    Raises:
        InvalidDateRangeError: If start_date >= end_date.
    """
    if start_date >= end_date:
        raise InvalidDateRangeError(start_date, end_date, subject=subject)


def validate_within_cycle(
    start_date: date,
    end_date: date,
    cycle_start: date,
    cycle_end: date,
) -> None:
    """Check that a term's range lies inside its academic cycle's range.

    Bounds are inclusive: a term may start on the cycle's first day and end
    on its last day.

    Raises:
        OutOfCycleRangeError: If start_date < cycle_start or end_date > cycle_end.
    """
    if start_date < cycle_start or end_date > cycle_end:
        raise OutOfCycleRangeError(start_date, end_date, cycle_start, cycle_end)
