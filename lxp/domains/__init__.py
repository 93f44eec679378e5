# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services.

Each subpackage owns the business rules for one area:
- academic_cycle: academic calendar periods
- term: terms inside academic cycles and their validation rules
- grade: grade books, student grades and final grade aggregation
- auth: token decoding and user types
"""
