# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade book and student grade API endpoints.

This module provides endpoints for grading:
- POST / - Create a grade book for a class in a term
- GET / - List grade books
- GET /{grade_book_id} - Get grade book with student grades
- PUT /{grade_book_id} - Replace calculation rules
- DELETE /{grade_book_id} - Delete grade book
- POST /{grade_book_id}/recalculate - Recompute stored final grades
- POST /{grade_book_id}/students - Record a student's grades
- GET /{grade_book_id}/students - List student grades
- PUT /{grade_book_id}/students/{student_id} - Update a student's grades
- GET /classes/{class_id}/final-grades - Compute final grades of a class
- GET /classes/{class_id}/students/{student_id}/progress - Student progress

Students only ever see their own grades.
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from lxp.api.dependencies import (
    GRADE_BOOK_DELETERS,
    GRADE_WRITERS,
    RequireUserType,
    get_app_settings,
    get_db,
    require_auth,
)
from lxp.api.middleware.auth import CurrentUser
from lxp.core.config import Settings
from lxp.core.enums import SystemStatus
from lxp.domains.grade import (
    GradeBookConflictError,
    GradeBookNotFoundError,
    GradeService,
    StudentGradeConflictError,
    StudentGradeNotFoundError,
    StudentNotFoundError,
)
from lxp.models.grade import (
    GradeBookCreateRequest,
    GradeBookFinalGrades,
    GradeBookListResponse,
    GradeBookResponse,
    GradeBookUpdateRequest,
    StudentGradeCreateRequest,
    StudentGradeFilters,
    StudentGradeListResponse,
    StudentGradeResponse,
    StudentGradeUpdateRequest,
    StudentProgressEntry,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> GradeService:
    """Get grade service configured with the grading settings."""
    return GradeService(db=db, final_grade_places=settings.grading.final_grade_places)


async def _own_student_id(service: GradeService, current_user: CurrentUser) -> str:
    """Resolve the student profile of a student user.

    Raises:
        HTTPException: If the user has no student profile.
    """
    student_id = await service.get_student_id_for_user(current_user.id)
    if not student_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No student profile for this user",
        )
    return student_id


# =========================================================================
# Grade books
# =========================================================================


@router.post(
    "",
    response_model=GradeBookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create grade book",
)
async def create_grade_book(
    data: GradeBookCreateRequest,
    current_user: CurrentUser = Depends(RequireUserType(*GRADE_WRITERS)),
    service: GradeService = Depends(_get_service),
) -> GradeBookResponse:
    """Create a grade book for a class in a term.

    Raises:
        HTTPException: 404 if the class or term does not exist, 409 if the
            class already has a grade book for the term.
    """
    logger.info(
        "Creating grade book for class %s term %s by %s",
        data.class_id,
        data.term_id,
        current_user.id,
    )

    try:
        return await service.create_grade_book(data, created_by=current_user.id)
    except GradeBookNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except GradeBookConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get(
    "",
    response_model=GradeBookListResponse,
    summary="List grade books",
)
async def list_grade_books(
    class_id: UUID | None = None,
    term_id: UUID | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 10,
    current_user: CurrentUser = Depends(require_auth),
    service: GradeService = Depends(_get_service),
) -> GradeBookListResponse:
    """List grade books, newest first."""
    items, total = await service.list_grade_books(
        class_id=class_id,
        term_id=term_id,
        page=page,
        page_size=page_size,
    )
    return GradeBookListResponse(items=items, total=total, page=page, page_size=page_size)


@router.get(
    "/classes/{class_id}/final-grades",
    response_model=list[GradeBookFinalGrades],
    summary="Calculate class final grades",
)
async def calculate_class_grades(
    class_id: UUID,
    current_user: CurrentUser = Depends(RequireUserType(*GRADE_WRITERS)),
    service: GradeService = Depends(_get_service),
) -> list[GradeBookFinalGrades]:
    """Compute every student's final grade in each grade book of a class."""
    return await service.calculate_class_grades(class_id)


@router.get(
    "/classes/{class_id}/students/{student_id}/progress",
    response_model=list[StudentProgressEntry],
    summary="Get student progress",
)
async def get_student_progress(
    class_id: UUID,
    student_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: GradeService = Depends(_get_service),
) -> list[StudentProgressEntry]:
    """Get a student's grades in each grade book of a class.

    Raises:
        HTTPException: 403 when a student asks for someone else's progress.
    """
    if current_user.is_student:
        own_id = await _own_student_id(service, current_user)
        if own_id != str(student_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only view your own progress",
            )

    return await service.get_student_progress(student_id, class_id)


@router.get(
    "/{grade_book_id}",
    response_model=GradeBookResponse,
    summary="Get grade book",
)
async def get_grade_book(
    grade_book_id: UUID,
    current_user: CurrentUser = Depends(RequireUserType(*GRADE_WRITERS)),
    service: GradeService = Depends(_get_service),
) -> GradeBookResponse:
    """Get a grade book with its student grades."""
    try:
        return await service.get_grade_book(grade_book_id)
    except GradeBookNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Grade book not found",
        )


@router.put(
    "/{grade_book_id}",
    response_model=GradeBookResponse,
    summary="Update grade book",
)
async def update_grade_book(
    grade_book_id: UUID,
    data: GradeBookUpdateRequest,
    current_user: CurrentUser = Depends(RequireUserType(*GRADE_WRITERS)),
    service: GradeService = Depends(_get_service),
) -> GradeBookResponse:
    """Replace a grade book's calculation rules or grading scale."""
    try:
        return await service.update_grade_book(grade_book_id, data, updated_by=current_user.id)
    except GradeBookNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete(
    "/{grade_book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete grade book",
)
async def delete_grade_book(
    grade_book_id: UUID,
    current_user: CurrentUser = Depends(RequireUserType(*GRADE_BOOK_DELETERS)),
    service: GradeService = Depends(_get_service),
) -> None:
    """Delete a grade book and its student grades."""
    logger.info("Deleting grade book %s by %s", grade_book_id, current_user.id)

    try:
        await service.delete_grade_book(grade_book_id)
    except GradeBookNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Grade book not found",
        )


@router.post(
    "/{grade_book_id}/recalculate",
    response_model=GradeBookFinalGrades,
    summary="Recalculate final grades",
)
async def recalculate_grade_book(
    grade_book_id: UUID,
    current_user: CurrentUser = Depends(RequireUserType(*GRADE_WRITERS)),
    service: GradeService = Depends(_get_service),
) -> GradeBookFinalGrades:
    """Recompute and store every student's final grade in a grade book."""
    try:
        return await service.recalculate_grade_book(grade_book_id)
    except GradeBookNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Grade book not found",
        )


# =========================================================================
# Student grades
# =========================================================================


@router.post(
    "/{grade_book_id}/students",
    response_model=StudentGradeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record student grade",
)
async def create_student_grade(
    grade_book_id: UUID,
    data: StudentGradeCreateRequest,
    current_user: CurrentUser = Depends(RequireUserType(*GRADE_WRITERS)),
    service: GradeService = Depends(_get_service),
) -> StudentGradeResponse:
    """Record a student's grades in a grade book.

    Raises:
        HTTPException: 404 if the grade book or student does not exist,
            409 if the student already has a grade here.
    """
    try:
        return await service.create_student_grade(grade_book_id, data)
    except (GradeBookNotFoundError, StudentNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StudentGradeConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get(
    "/{grade_book_id}/students",
    response_model=StudentGradeListResponse,
    summary="List student grades",
)
async def list_student_grades(
    grade_book_id: UUID,
    student_id: UUID | None = None,
    grade_status: Annotated[SystemStatus | None, Query(alias="status")] = None,
    min_final_grade: Annotated[float | None, Query(ge=0)] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 10,
    current_user: CurrentUser = Depends(require_auth),
    service: GradeService = Depends(_get_service),
) -> StudentGradeListResponse:
    """List student grades of a grade book. Students see only their own."""
    if current_user.is_student:
        student_id = UUID(await _own_student_id(service, current_user))

    filters = StudentGradeFilters(
        grade_book_id=grade_book_id,
        student_id=student_id,
        status=grade_status,
        min_final_grade=min_final_grade,
    )
    items, total = await service.list_student_grades(filters, page=page, page_size=page_size)

    return StudentGradeListResponse(items=items, total=total, page=page, page_size=page_size)


@router.put(
    "/{grade_book_id}/students/{student_id}",
    response_model=StudentGradeResponse,
    summary="Update student grade",
)
async def update_student_grade(
    grade_book_id: UUID,
    student_id: UUID,
    data: StudentGradeUpdateRequest,
    current_user: CurrentUser = Depends(RequireUserType(*GRADE_WRITERS)),
    service: GradeService = Depends(_get_service),
) -> StudentGradeResponse:
    """Update a student's grades; changed assessments recompute the final grade."""
    try:
        return await service.update_student_grade(grade_book_id, student_id, data)
    except (GradeBookNotFoundError, StudentGradeNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
