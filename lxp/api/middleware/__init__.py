# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware package."""

from lxp.api.middleware.auth import AuthMiddleware, CurrentUser, get_current_user
from lxp.api.middleware.rate_limit import (
    build_limiter,
    get_client_identifier,
    rate_limit_exceeded_handler,
)
from lxp.api.middleware.request_logging import RequestLoggingMiddleware

__all__ = [
    "AuthMiddleware",
    "CurrentUser",
    "get_current_user",
    "build_limiter",
    "get_client_identifier",
    "rate_limit_exceeded_handler",
    "RequestLoggingMiddleware",
]
