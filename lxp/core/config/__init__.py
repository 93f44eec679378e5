# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the LXP academic core.

Example:
    >>> from lxp.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.grading.final_grade_places
    2
"""

from lxp.core.config.settings import (
    APISettings,
    CORSSettings,
    DatabaseSettings,
    GradingSettings,
    JWTSettings,
    RateLimitSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "DatabaseSettings",
    "JWTSettings",
    "RateLimitSettings",
    "CORSSettings",
    "APISettings",
    "GradingSettings",
]
