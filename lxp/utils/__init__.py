# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Cross-cutting utilities.

- logging: Structured logging with structlog
"""

from lxp.utils.logging import bind_context, clear_context, setup_logging

__all__ = [
    "setup_logging",
    "bind_context",
    "clear_context",
]
