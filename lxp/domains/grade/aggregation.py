# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Weighted final grade calculation and letter grade lookup.

The final grade of a student in a grade book is the weighted mean of the
recorded assessment scores:

    final = sum(score_i * weight_i) / sum(weight_i)

taken over the assessments present in the student's grades. Assessments
without a configured weight count with weight 1. When the total weight is
zero (no grades recorded) the final grade is 0 rather than an error.
Non-finite scores or weights (infinity, NaN) are left out of the mean.

Results are rounded half-up to FINAL_GRADE_PLACES decimal places. All
arithmetic runs in a local decimal context wide enough for any float, so
very large inputs never raise.

Example:
    >>> calculate_final_grade({"A": 90, "B": 80}, {"A": 2, "B": 1})
    86.67
    >>> letter_grade_for(86.67, [{"grade": "A", "min_score": 90, "max_score": 100},
    ...                          {"grade": "B", "min_score": 80, "max_score": 89}])
    'B'
"""

from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

DEFAULT_WEIGHT = 1
FINAL_GRADE_PLACES = 2

# Enough digits for a float product sum; rounding widens it further
ARITHMETIC_PRECISION = 60


def calculate_final_grade(
    assessment_grades: Mapping[str, float],
    weights: Mapping[str, float] | None = None,
    places: int = FINAL_GRADE_PLACES,
) -> float:
    """Compute a weighted final grade.

    Args:
        assessment_grades: Score per assessment id.
        weights: Weight per assessment id. Ids missing here, or mapped to a
            falsy value, use weight 1.
        places: Decimal places kept after rounding.

    Returns:
        The rounded weighted mean, or 0.0 when the total weight is 0.
    """
    weights = weights or {}

    with localcontext() as ctx:
        ctx.prec = ARITHMETIC_PRECISION
        total_weighted = Decimal(0)
        total_weight = Decimal(0)

        for assessment_id, score in assessment_grades.items():
            value = _to_decimal(score)
            weight = _to_decimal(weights.get(assessment_id) or DEFAULT_WEIGHT)
            if not (value.is_finite() and weight.is_finite()):
                continue
            total_weighted += value * weight
            total_weight += weight

        if total_weight == 0:
            return 0.0

        return round_grade(total_weighted / total_weight, places)


def round_grade(value: Decimal | float, places: int = FINAL_GRADE_PLACES) -> float:
    """Round a grade half-up to the given number of decimal places.

    Non-finite values are returned unchanged as floats.
    """
    value = _to_decimal(value)
    if not value.is_finite():
        return float(value)

    with localcontext() as ctx:
        # quantize needs every integer digit plus the kept places
        ctx.prec = max(ARITHMETIC_PRECISION, value.adjusted() + places + 2)
        quantum = Decimal(1).scaleb(-places)
        return float(value.quantize(quantum, rounding=ROUND_HALF_UP))


def letter_grade_for(score: float, ranges: Iterable[Mapping[str, Any]]) -> str | None:
    """Look up the grade of a score in a grading scale's ranges.

    The range with the highest min_score not above the score wins, so a
    score falling between two ranges (89.5 between B 80-89 and A 90-100)
    takes the lower grade.

    Returns:
        The grade label, or None when the score is below every range.
    """
    best: Mapping[str, Any] | None = None
    for grade_range in ranges:
        if grade_range["min_score"] > score:
            continue
        if best is None or grade_range["min_score"] > best["min_score"]:
            best = grade_range
    return best["grade"] if best is not None else None


def _to_decimal(value: Decimal | float | int) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    return Decimal(str(value))
