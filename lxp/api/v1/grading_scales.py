# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading scale API endpoints.

This module provides endpoints for grading scale management:
- POST / - Create a grading scale
- GET / - List grading scales
- GET /{scale_id} - Get grading scale details
- PUT /{scale_id} - Update a grading scale
- DELETE /{scale_id} - Delete a grading scale

Ranges that fall outside the scale bounds or overlap are returned as 400.
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from lxp.api.dependencies import (
    SCALE_DELETERS,
    SCALE_WRITERS,
    RequireUserType,
    get_db,
    require_auth,
)
from lxp.api.middleware.auth import CurrentUser
from lxp.core.enums import SystemStatus
from lxp.domains.grading_scale import (
    GradingScaleNotFoundError,
    GradingScaleService,
    GradingScaleValidationError,
)
from lxp.models.grading_scale import (
    GradingScaleCreateRequest,
    GradingScaleFilters,
    GradingScaleListResponse,
    GradingScaleResponse,
    GradingScaleUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession) -> GradingScaleService:
    return GradingScaleService(db=db)


@router.post(
    "",
    response_model=GradingScaleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create grading scale",
)
async def create_grading_scale(
    data: GradingScaleCreateRequest,
    current_user: CurrentUser = Depends(RequireUserType(*SCALE_WRITERS)),
    db: AsyncSession = Depends(get_db),
) -> GradingScaleResponse:
    """Create a grading scale.

    Raises:
        HTTPException: 400 if the ranges do not fit the scale.
    """
    logger.info("Creating grading scale: %s by %s", data.name, current_user.id)

    service = _get_service(db)

    try:
        return await service.create_scale(data, created_by=current_user.id)
    except GradingScaleValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get(
    "",
    response_model=GradingScaleListResponse,
    summary="List grading scales",
)
async def list_grading_scales(
    scale_status: Annotated[SystemStatus | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query(description="Matches name")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 10,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> GradingScaleListResponse:
    """List grading scales, newest first."""
    service = _get_service(db)

    filters = GradingScaleFilters(status=scale_status, search=search)
    items, total = await service.list_scales(filters, page=page, page_size=page_size)

    return GradingScaleListResponse(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
        has_more=total > page * page_size,
    )


@router.get(
    "/{scale_id}",
    response_model=GradingScaleResponse,
    summary="Get grading scale",
)
async def get_grading_scale(
    scale_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> GradingScaleResponse:
    """Get grading scale details."""
    service = _get_service(db)

    try:
        return await service.get_scale(scale_id)
    except GradingScaleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Grading scale not found",
        )


@router.put(
    "/{scale_id}",
    response_model=GradingScaleResponse,
    summary="Update grading scale",
)
async def update_grading_scale(
    scale_id: UUID,
    data: GradingScaleUpdateRequest,
    current_user: CurrentUser = Depends(RequireUserType(*SCALE_WRITERS)),
    db: AsyncSession = Depends(get_db),
) -> GradingScaleResponse:
    """Update a grading scale.

    Raises:
        HTTPException: 400 if the ranges do not fit the scale, 404 if not
            found.
    """
    service = _get_service(db)

    try:
        return await service.update_scale(scale_id, data, updated_by=current_user.id)
    except GradingScaleValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GradingScaleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Grading scale not found",
        )


@router.delete(
    "/{scale_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete grading scale",
)
async def delete_grading_scale(
    scale_id: UUID,
    current_user: CurrentUser = Depends(RequireUserType(*SCALE_DELETERS)),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a grading scale. Grade books using it are detached."""
    logger.info("Deleting grading scale %s by %s", scale_id, current_user.id)

    service = _get_service(db)

    try:
        await service.delete_scale(scale_id)
    except GradingScaleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Grading scale not found",
        )
