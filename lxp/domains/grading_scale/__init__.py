# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading scale domain package."""

from lxp.domains.grading_scale.service import (
    GradingScaleNotFoundError,
    GradingScaleService,
    GradingScaleServiceError,
    GradingScaleValidationError,
    validate_scale,
)

__all__ = [
    "GradingScaleService",
    "GradingScaleServiceError",
    "GradingScaleNotFoundError",
    "GradingScaleValidationError",
    "validate_scale",
]
