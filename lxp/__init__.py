# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LXP academic core.

Academic cycle, term and grade book management for the LXP admin platform.
"""

__version__ = "1.0.0"
