# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic cycle management API endpoints.

This module provides endpoints for academic cycle management:
- POST / - Create a new academic cycle
- GET / - List academic cycles
- GET /current - Get the cycle containing today
- GET /date-range - Get cycles overlapping a date range
- GET /upcoming - Get cycles that have not started yet
- GET /{cycle_id} - Get academic cycle details
- PUT /{cycle_id} - Update academic cycle
- DELETE /{cycle_id} - Delete academic cycle

Reads are open to any authenticated user. Writes require a system admin
or manager; deletion requires a system admin.
"""

import logging
from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from lxp.api.dependencies import (
    CYCLE_DELETERS,
    CYCLE_WRITERS,
    RequireUserType,
    get_db,
    require_auth,
)
from lxp.api.middleware.auth import CurrentUser
from lxp.core.enums import AcademicCycleType, SystemStatus
from lxp.domains.academic_cycle.service import (
    DEFAULT_UPCOMING_LIMIT,
    MAX_UPCOMING_LIMIT,
    AcademicCycleConflictError,
    AcademicCycleNotFoundError,
    AcademicCycleService,
    AcademicCycleServiceError,
)
from lxp.domains.term.errors import TermValidationError
from lxp.models.academic_cycle import (
    AcademicCycleCreateRequest,
    AcademicCycleFilters,
    AcademicCycleListResponse,
    AcademicCycleResponse,
    AcademicCycleSummary,
    AcademicCycleUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession) -> AcademicCycleService:
    return AcademicCycleService(db=db)


@router.post(
    "",
    response_model=AcademicCycleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create academic cycle",
    description="Create a new academic cycle. Requires system admin or manager.",
)
async def create_academic_cycle(
    data: AcademicCycleCreateRequest,
    current_user: CurrentUser = Depends(RequireUserType(*CYCLE_WRITERS)),
    db: AsyncSession = Depends(get_db),
) -> AcademicCycleResponse:
    """Create a new academic cycle.

    Raises:
        HTTPException: 400 on invalid dates, 409 on duplicate code.
    """
    logger.info(
        "Creating academic cycle: %s (%s to %s) by %s",
        data.code,
        data.start_date,
        data.end_date,
        current_user.id,
    )

    service = _get_service(db)

    try:
        return await service.create_academic_cycle(data, created_by=current_user.id)
    except TermValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AcademicCycleConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get(
    "",
    response_model=AcademicCycleListResponse,
    summary="List academic cycles",
)
async def list_academic_cycles(
    cycle_type: Annotated[AcademicCycleType | None, Query(alias="type")] = None,
    cycle_status: Annotated[SystemStatus | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query(description="Matches name or code")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 10,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> AcademicCycleListResponse:
    """List academic cycles, latest start first."""
    service = _get_service(db)

    filters = AcademicCycleFilters(type=cycle_type, status=cycle_status, search=search)
    items, total = await service.list_academic_cycles(filters, page=page, page_size=page_size)

    return AcademicCycleListResponse(items=items, total=total, page=page, page_size=page_size)


@router.get(
    "/current",
    response_model=AcademicCycleResponse | None,
    summary="Get current academic cycle",
)
async def get_current_academic_cycle(
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> AcademicCycleResponse | None:
    """Get the active cycle containing today, or null."""
    service = _get_service(db)
    return await service.get_current_academic_cycle()


@router.get(
    "/date-range",
    response_model=list[AcademicCycleSummary],
    summary="Get academic cycles by date range",
)
async def get_academic_cycles_by_date_range(
    start_date: date,
    end_date: date,
    cycle_type: Annotated[AcademicCycleType | None, Query(alias="type")] = None,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> list[AcademicCycleSummary]:
    """Get cycles overlapping [start_date, end_date].

    Raises:
        HTTPException: 400 if start_date is not before end_date.
    """
    service = _get_service(db)

    try:
        return await service.get_academic_cycles_by_date_range(start_date, end_date, cycle_type)
    except TermValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get(
    "/upcoming",
    response_model=list[AcademicCycleSummary],
    summary="Get upcoming academic cycles",
)
async def get_upcoming_cycles(
    limit: Annotated[int, Query(ge=1, le=MAX_UPCOMING_LIMIT)] = DEFAULT_UPCOMING_LIMIT,
    cycle_type: Annotated[AcademicCycleType | None, Query(alias="type")] = None,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> list[AcademicCycleSummary]:
    """Get active cycles starting after today, soonest first."""
    service = _get_service(db)
    return await service.get_upcoming_cycles(limit=limit, cycle_type=cycle_type)


@router.get(
    "/{cycle_id}",
    response_model=AcademicCycleResponse,
    summary="Get academic cycle",
)
async def get_academic_cycle(
    cycle_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> AcademicCycleResponse:
    """Get academic cycle details.

    Raises:
        HTTPException: If academic cycle not found.
    """
    service = _get_service(db)

    try:
        return await service.get_academic_cycle(cycle_id)
    except AcademicCycleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Academic cycle not found",
        )


@router.put(
    "/{cycle_id}",
    response_model=AcademicCycleResponse,
    summary="Update academic cycle",
    description="Update an academic cycle. Requires system admin or manager.",
)
async def update_academic_cycle(
    cycle_id: UUID,
    data: AcademicCycleUpdateRequest,
    current_user: CurrentUser = Depends(RequireUserType(*CYCLE_WRITERS)),
    db: AsyncSession = Depends(get_db),
) -> AcademicCycleResponse:
    """Update an academic cycle.

    Raises:
        HTTPException: 404 if not found, 400 on invalid dates or when a
            term would fall outside the new range, 409 on duplicate code.
    """
    service = _get_service(db)

    try:
        return await service.update_academic_cycle(cycle_id, data, updated_by=current_user.id)
    except AcademicCycleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Academic cycle not found",
        )
    except TermValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AcademicCycleConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.delete(
    "/{cycle_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete academic cycle",
    description="Soft delete an academic cycle without terms. Requires system admin.",
)
async def delete_academic_cycle(
    cycle_id: UUID,
    current_user: CurrentUser = Depends(RequireUserType(*CYCLE_DELETERS)),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete an academic cycle.

    Raises:
        HTTPException: 404 if not found, 412 if the cycle still has terms.
    """
    logger.info("Deleting academic cycle %s by %s", cycle_id, current_user.id)

    service = _get_service(db)

    try:
        await service.delete_academic_cycle(cycle_id, deleted_by=current_user.id)
    except AcademicCycleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Academic cycle not found",
        )
    except AcademicCycleServiceError as e:
        raise HTTPException(status_code=status.HTTP_412_PRECONDITION_FAILED, detail=str(e))
