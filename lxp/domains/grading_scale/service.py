# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading scale service.

This module provides the GradingScaleService class for:
- Grading scale CRUD operations
- Checking that a scale's ranges fit its bounds without overlapping

Grade books that use a deleted scale keep their grades; the foreign key
detaches them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lxp.infrastructure.database.models import GradingScale
from lxp.models.grading_scale import (
    GradeRange,
    GradingScaleCreateRequest,
    GradingScaleFilters,
    GradingScaleResponse,
    GradingScaleUpdateRequest,
)

logger = logging.getLogger(__name__)


class GradingScaleServiceError(Exception):
    """Base exception for grading scale service errors."""

    pass


class GradingScaleNotFoundError(GradingScaleServiceError):
    """Raised when a grading scale is not found."""

    pass


class GradingScaleValidationError(GradingScaleServiceError):
    """Raised when a scale's bounds or ranges are inconsistent."""

    pass


def validate_scale(min_score: float, max_score: float, ranges: Sequence[GradeRange]) -> None:
    """Check the scale bounds and that its ranges fit them.

    Ranges must lie within [min_score, max_score], use distinct grades and
    not overlap. Gaps between ranges are allowed.

    Raises:
        GradingScaleValidationError: On the first rule broken.
    """
    if min_score >= max_score:
        raise GradingScaleValidationError("Scale max_score must be greater than min_score")

    grades = [grade_range.grade for grade_range in ranges]
    if len(set(grades)) != len(grades):
        raise GradingScaleValidationError("Grades in a scale must be unique")

    for grade_range in ranges:
        if grade_range.min_score < min_score or grade_range.max_score > max_score:
            raise GradingScaleValidationError(
                f"Range {grade_range.grade} must fall within {min_score} to {max_score}"
            )

    ordered = sorted(ranges, key=lambda grade_range: grade_range.min_score)
    for lower, upper in zip(ordered, ordered[1:]):
        if upper.min_score <= lower.max_score:
            raise GradingScaleValidationError(
                f"Ranges {lower.grade} and {upper.grade} overlap"
            )


class GradingScaleService:
    """Service for managing grading scales.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_scale(
        self,
        request: GradingScaleCreateRequest,
        created_by: str | None = None,
    ) -> GradingScaleResponse:
        """Create a grading scale.

        Raises:
            GradingScaleValidationError: If the ranges do not fit the bounds.
        """
        validate_scale(request.min_score, request.max_score, request.ranges)

        scale = GradingScale(
            name=request.name,
            type=request.type,
            min_score=request.min_score,
            max_score=request.max_score,
            ranges=[grade_range.model_dump() for grade_range in request.ranges],
            status=request.status,
            created_by_id=created_by,
        )

        self.db.add(scale)
        await self.db.commit()
        await self.db.refresh(scale)

        logger.info("Created grading scale: %s (%s)", scale.name, scale.id)

        return self._to_response(scale)

    async def get_scale(self, scale_id: UUID) -> GradingScaleResponse:
        """Get a grading scale by ID.

        Raises:
            GradingScaleNotFoundError: If not found.
        """
        scale = await self._get_by_id(scale_id)
        return self._to_response(scale)

    async def list_scales(
        self,
        filters: GradingScaleFilters | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[GradingScaleResponse], int]:
        """List grading scales, newest first.

        Returns:
            Tuple of (page of scales, total count).
        """
        filters = filters or GradingScaleFilters()
        query = select(GradingScale)

        if filters.status:
            query = query.where(GradingScale.status == filters.status)
        if filters.search:
            query = query.where(GradingScale.name.ilike(f"%{filters.search}%"))

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        query = (
            query.order_by(GradingScale.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(query)
        scales = result.scalars().all()

        return [self._to_response(scale) for scale in scales], total

    async def update_scale(
        self,
        scale_id: UUID,
        request: GradingScaleUpdateRequest,
        updated_by: str | None = None,
    ) -> GradingScaleResponse:
        """Update a grading scale.

        The merged bounds and ranges are validated together.

        Raises:
            GradingScaleNotFoundError: If not found.
            GradingScaleValidationError: If the ranges do not fit the bounds.
        """
        scale = await self._get_by_id(scale_id)

        ranges = request.ranges
        if ranges is None:
            ranges = [GradeRange(**grade_range) for grade_range in scale.ranges]
        validate_scale(
            request.min_score if request.min_score is not None else scale.min_score,
            request.max_score if request.max_score is not None else scale.max_score,
            ranges,
        )

        for field, value in request.model_dump(exclude_unset=True, exclude={"ranges"}).items():
            if value is not None:
                setattr(scale, field, value)
        if request.ranges is not None:
            scale.ranges = [grade_range.model_dump() for grade_range in request.ranges]
        scale.updated_by_id = updated_by

        await self.db.commit()
        await self.db.refresh(scale)

        logger.info("Updated grading scale: %s", scale_id)

        return self._to_response(scale)

    async def delete_scale(self, scale_id: UUID) -> None:
        """Delete a grading scale.

        Raises:
            GradingScaleNotFoundError: If not found.
        """
        scale = await self._get_by_id(scale_id)

        await self.db.delete(scale)
        await self.db.commit()

        logger.info("Deleted grading scale: %s", scale_id)

    async def _get_by_id(self, scale_id: UUID | str) -> GradingScale:
        query = select(GradingScale).where(GradingScale.id == str(scale_id))
        result = await self.db.execute(query)
        scale = result.scalar_one_or_none()

        if not scale:
            raise GradingScaleNotFoundError(f"Grading scale {scale_id} not found")

        return scale

    def _to_response(self, scale: GradingScale) -> GradingScaleResponse:
        return GradingScaleResponse(
            id=UUID(str(scale.id)),
            name=scale.name,
            type=scale.type,
            min_score=scale.min_score,
            max_score=scale.max_score,
            status=scale.status,
            ranges=[GradeRange(**grade_range) for grade_range in scale.ranges or []],
            created_by_id=scale.created_by_id,
            updated_by_id=scale.updated_by_id,
            created_at=scale.created_at,
        )
