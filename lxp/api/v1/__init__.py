# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    academic_cycles: Academic cycle management endpoints.
    terms: Term management endpoints.
    grade_books: Grade book, student grade and final grade endpoints.
    grading_scales: Grading scale endpoints.
"""

from fastapi import APIRouter

from lxp.api.v1 import academic_cycles, grade_books, grading_scales, terms

router = APIRouter(prefix="/api/v1")

router.include_router(academic_cycles.router, prefix="/academic-cycles", tags=["Academic Cycles"])
router.include_router(terms.router, prefix="/terms", tags=["Terms"])
router.include_router(grade_books.router, prefix="/grade-books", tags=["Grade Books"])
router.include_router(grading_scales.router, prefix="/grading-scales", tags=["Grading Scales"])

__all__ = ["router"]
