# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Term management API endpoints.

This module provides endpoints for term management:
- POST / - Create a new term
- GET / - List terms
- GET /{term_id} - Get term details
- PUT /{term_id} - Update term
- DELETE /{term_id} - Delete term

Validation failures (illegal period for the term type, misordered dates,
dates outside the academic cycle) are returned as 400.
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from lxp.api.dependencies import (
    TERM_DELETERS,
    TERM_WRITERS,
    RequireUserType,
    get_db,
    require_auth,
)
from lxp.api.middleware.auth import CurrentUser
from lxp.core.enums import SystemStatus, TermPeriod, TermType
from lxp.domains.term import (
    TermConflictError,
    TermDependencyError,
    TermNotFoundError,
    TermService,
    TermValidationError,
)
from lxp.models.term import (
    TermCreateRequest,
    TermFilters,
    TermListResponse,
    TermResponse,
    TermUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession) -> TermService:
    return TermService(db=db)


@router.post(
    "",
    response_model=TermResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create term",
)
async def create_term(
    data: TermCreateRequest,
    current_user: CurrentUser = Depends(RequireUserType(*TERM_WRITERS)),
    db: AsyncSession = Depends(get_db),
) -> TermResponse:
    """Create a new term inside an academic cycle.

    Raises:
        HTTPException: 400 on validation failure, 404 if the course or cycle
            does not exist, 409 on duplicate code.
    """
    logger.info(
        "Creating term: %s (%s/%s) by %s",
        data.code,
        data.term_type.value,
        data.term_period.value,
        current_user.id,
    )

    service = _get_service(db)

    try:
        return await service.create_term(data)
    except TermValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except TermNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except TermConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get(
    "",
    response_model=TermListResponse,
    summary="List terms",
)
async def list_terms(
    course_id: UUID | None = None,
    academic_cycle_id: UUID | None = None,
    term_type: TermType | None = None,
    term_period: TermPeriod | None = None,
    term_status: Annotated[SystemStatus | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query(description="Matches name or code")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 10,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> TermListResponse:
    """List terms, earliest first."""
    service = _get_service(db)

    filters = TermFilters(
        course_id=course_id,
        academic_cycle_id=academic_cycle_id,
        term_type=term_type,
        term_period=term_period,
        status=term_status,
        search=search,
    )
    items, total = await service.list_terms(filters, page=page, page_size=page_size)

    return TermListResponse(items=items, total=total, page=page, page_size=page_size)


@router.get(
    "/{term_id}",
    response_model=TermResponse,
    summary="Get term",
)
async def get_term(
    term_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> TermResponse:
    """Get term details."""
    service = _get_service(db)

    try:
        return await service.get_term(term_id)
    except TermNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Term not found",
        )


@router.put(
    "/{term_id}",
    response_model=TermResponse,
    summary="Update term",
)
async def update_term(
    term_id: UUID,
    data: TermUpdateRequest,
    current_user: CurrentUser = Depends(RequireUserType(*TERM_WRITERS)),
    db: AsyncSession = Depends(get_db),
) -> TermResponse:
    """Update a term.

    Raises:
        HTTPException: 400 on validation failure, 404 if the term or a
            referenced course or cycle does not exist, 409 on duplicate code.
    """
    service = _get_service(db)

    try:
        return await service.update_term(term_id, data)
    except TermValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except TermNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except TermConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.delete(
    "/{term_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete term",
)
async def delete_term(
    term_id: UUID,
    current_user: CurrentUser = Depends(RequireUserType(*TERM_DELETERS)),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a term no class or grade book uses.

    Raises:
        HTTPException: 404 if not found, 412 if dependencies exist.
    """
    logger.info("Deleting term %s by %s", term_id, current_user.id)

    service = _get_service(db)

    try:
        await service.delete_term(term_id)
    except TermNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Term not found",
        )
    except TermDependencyError as e:
        raise HTTPException(status_code=status.HTTP_412_PRECONDITION_FAILED, detail=str(e))
