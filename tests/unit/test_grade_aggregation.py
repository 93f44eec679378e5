# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for weighted final grade calculation."""

from decimal import Decimal

import pytest

from lxp.domains.grade import calculate_final_grade, letter_grade_for, round_grade


class TestCalculateFinalGrade:
    """Tests for calculate_final_grade."""

    def test_weighted_mean(self):
        assert calculate_final_grade({"A": 90, "B": 80}, {"A": 2, "B": 1}) == 86.67

    def test_empty_grades_give_zero(self):
        assert calculate_final_grade({}, {"A": 2}) == 0.0

    def test_empty_grades_without_weights(self):
        assert calculate_final_grade({}) == 0.0

    def test_missing_weight_counts_as_one(self):
        assert calculate_final_grade({"A": 90, "B": 70}, {"A": 1}) == 80.0

    def test_no_weights_is_plain_mean(self):
        assert calculate_final_grade({"A": 100, "B": 50, "C": 60}) == 70.0

    def test_weights_for_absent_assessments_are_ignored(self):
        assert calculate_final_grade({"A": 75}, {"A": 1, "B": 10}) == 75.0

    def test_zero_weight_counts_as_one(self):
        assert calculate_final_grade({"A": 90, "B": 70}, {"A": 0, "B": 1}) == 80.0

    def test_single_grade(self):
        assert calculate_final_grade({"exam": 88.5}, {"exam": 3}) == 88.5

    def test_rounds_half_up(self):
        assert calculate_final_grade({"A": 90.005}) == 90.01

    def test_custom_places(self):
        assert calculate_final_grade({"A": 90, "B": 80}, {"A": 2, "B": 1}, places=0) == 87.0

    def test_is_deterministic(self):
        grades = {"quiz": 73.3, "exam": 91.2, "project": 64}
        weights = {"exam": 3, "project": 2}

        first = calculate_final_grade(grades, weights)
        assert all(calculate_final_grade(grades, weights) == first for _ in range(5))

    def test_does_not_mutate_inputs(self):
        grades = {"A": 90, "B": 80}
        weights = {"A": 2}

        calculate_final_grade(grades, weights)

        assert grades == {"A": 90, "B": 80}
        assert weights == {"A": 2}

    def test_huge_score_does_not_raise(self):
        assert calculate_final_grade({"A": 1e30}) == 1e30

    def test_extreme_score_and_weight(self):
        assert calculate_final_grade({"A": 1e300, "B": 0}, {"A": 1e26}) == pytest.approx(1e300)

    def test_infinite_score_is_left_out(self):
        assert calculate_final_grade({"A": float("inf"), "B": 80}) == 80.0

    def test_only_non_finite_values_give_zero(self):
        assert calculate_final_grade({"A": float("inf"), "B": float("nan")}) == 0.0

    def test_infinite_weight_is_left_out(self):
        assert calculate_final_grade({"A": 90, "B": 70}, {"A": float("inf")}) == 70.0

class TestRoundGrade:
    """Tests for round_grade."""

    @pytest.mark.parametrize(
        "value,places,expected",
        [
            (Decimal("86.665"), 2, 86.67),
            (Decimal("86.664"), 2, 86.66),
            (2.5, 0, 3.0),
            (0.125, 2, 0.13),
        ],
    )
    def test_round_half_up(self, value, places, expected):
        assert round_grade(value, places) == expected

    def test_huge_value_keeps_places(self):
        assert round_grade(Decimal("1e300"), 2) == 1e300

    def test_infinity_passes_through(self):
        assert round_grade(float("inf")) == float("inf")


class TestLetterGradeFor:
    """Tests for letter_grade_for."""

    RANGES = [
        {"grade": "A", "min_score": 90, "max_score": 100},
        {"grade": "B", "min_score": 80, "max_score": 89},
        {"grade": "C", "min_score": 70, "max_score": 79},
        {"grade": "F", "min_score": 0, "max_score": 69},
    ]

    @pytest.mark.parametrize(
        "score,expected",
        [
            (95, "A"),
            (90, "A"),
            (86.67, "B"),
            (70, "C"),
            (12.5, "F"),
        ],
    )
    def test_score_in_range(self, score, expected):
        assert letter_grade_for(score, self.RANGES) == expected

    def test_score_between_ranges_takes_lower_grade(self):
        assert letter_grade_for(89.5, self.RANGES) == "B"

    def test_score_below_every_range(self):
        assert letter_grade_for(50, self.RANGES[:3]) is None

    def test_unordered_ranges(self):
        assert letter_grade_for(91, list(reversed(self.RANGES))) == "A"

    def test_no_ranges(self):
        assert letter_grade_for(91, []) is None
