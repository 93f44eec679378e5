# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic cycle service for managing academic cycle operations.

This module provides the AcademicCycleService class for:
- Academic cycle CRUD operations with soft deletion
- Current, date range and upcoming cycle lookups
- Keeping existing terms inside a cycle when its dates change
"""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lxp.core.enums import AcademicCycleType, SystemStatus
from lxp.domains.term.errors import OutOfCycleRangeError
from lxp.domains.term.validation import validate_term_dates
from lxp.infrastructure.database.models import AcademicCycle, Term
from lxp.infrastructure.database.models.base import utc_now
from lxp.models.academic_cycle import (
    AcademicCycleCreateRequest,
    AcademicCycleFilters,
    AcademicCycleResponse,
    AcademicCycleSummary,
    AcademicCycleUpdateRequest,
)

logger = logging.getLogger(__name__)

MAX_UPCOMING_LIMIT = 20
DEFAULT_UPCOMING_LIMIT = 5


class AcademicCycleServiceError(Exception):
    """Base exception for academic cycle service errors."""

    pass


class AcademicCycleNotFoundError(AcademicCycleServiceError):
    """Raised when academic cycle is not found."""

    pass


class AcademicCycleConflictError(AcademicCycleServiceError):
    """Raised when an academic cycle code is already in use."""

    pass


class AcademicCycleService:
    """Service for managing academic cycles.

    Deleted cycles are kept with deleted_at set and status DELETED; every
    lookup here ignores them.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize academic cycle service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def create_academic_cycle(
        self,
        request: AcademicCycleCreateRequest,
        created_by: str | None = None,
    ) -> AcademicCycleResponse:
        """Create a new academic cycle.

        Args:
            request: Academic cycle creation data.
            created_by: ID of the creating user.

        Returns:
            Created academic cycle.

        Raises:
            InvalidDateRangeError: If start date is not before end date.
            AcademicCycleConflictError: If the code is already used.
        """
        validate_term_dates(request.start_date, request.end_date, subject="Academic cycle")
        await self._ensure_code_available(request.code)

        cycle = AcademicCycle(
            code=request.code,
            name=request.name,
            description=request.description,
            type=request.type,
            start_date=request.start_date,
            end_date=request.end_date,
            status=SystemStatus.ACTIVE,
            created_by=created_by,
            updated_by=created_by,
        )

        self.db.add(cycle)
        await self._commit(f"Academic cycle with code {request.code} already exists")
        await self.db.refresh(cycle)

        logger.info("Created academic cycle: %s (%s)", cycle.code, cycle.id)

        return self._to_response(cycle, term_count=0)

    async def get_academic_cycle(self, cycle_id: UUID) -> AcademicCycleResponse:
        """Get academic cycle by ID.

        Raises:
            AcademicCycleNotFoundError: If cycle not found.
        """
        cycle = await self._get_by_id(cycle_id)
        term_count = await self._get_term_count(cycle.id)
        return self._to_response(cycle, term_count)

    async def list_academic_cycles(
        self,
        filters: AcademicCycleFilters | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[AcademicCycleSummary], int]:
        """List academic cycles, latest start first.

        Args:
            filters: Optional filters.
            page: 1-based page number.
            page_size: Items per page.

        Returns:
            Tuple of (page of cycles, total count).
        """
        filters = filters or AcademicCycleFilters()
        query = select(AcademicCycle).where(AcademicCycle.deleted_at.is_(None))

        if filters.type:
            query = query.where(AcademicCycle.type == filters.type)
        if filters.status:
            query = query.where(AcademicCycle.status == filters.status)
        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.where(
                or_(AcademicCycle.name.ilike(pattern), AcademicCycle.code.ilike(pattern))
            )

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        query = (
            query.order_by(AcademicCycle.start_date.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(query)
        cycles = result.scalars().all()

        return [self._to_summary(cycle) for cycle in cycles], total

    async def update_academic_cycle(
        self,
        cycle_id: UUID,
        request: AcademicCycleUpdateRequest,
        updated_by: str | None = None,
    ) -> AcademicCycleResponse:
        """Update an academic cycle.

        New dates are merged with the stored ones, and the resulting range
        must still contain every term of the cycle.

        Raises:
            AcademicCycleNotFoundError: If cycle not found.
            AcademicCycleConflictError: If the new code is already used.
            InvalidDateRangeError: If the merged dates are out of order.
            OutOfCycleRangeError: If an existing term would fall outside.
        """
        cycle = await self._get_by_id(cycle_id)

        new_start = request.start_date or cycle.start_date
        new_end = request.end_date or cycle.end_date

        if request.start_date or request.end_date:
            validate_term_dates(new_start, new_end, subject="Academic cycle")

        if request.code and request.code != cycle.code:
            await self._ensure_code_available(request.code)

        if new_start != cycle.start_date or new_end != cycle.end_date:
            await self._ensure_terms_fit(cycle.id, new_start, new_end)

        for field, value in request.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(cycle, field, value)
        cycle.updated_by = updated_by

        await self._commit(f"Academic cycle with code {cycle.code} already exists")
        await self.db.refresh(cycle)

        logger.info("Updated academic cycle: %s", cycle_id)

        term_count = await self._get_term_count(cycle.id)
        return self._to_response(cycle, term_count)

    async def delete_academic_cycle(
        self,
        cycle_id: UUID,
        deleted_by: str | None = None,
    ) -> None:
        """Soft delete an academic cycle.

        Raises:
            AcademicCycleNotFoundError: If cycle not found.
            AcademicCycleServiceError: If the cycle still has terms.
        """
        cycle = await self._get_by_id(cycle_id)

        term_count = await self._get_term_count(cycle.id)
        if term_count > 0:
            raise AcademicCycleServiceError(
                f"Cannot delete academic cycle with {term_count} associated terms"
            )

        cycle.deleted_at = utc_now()
        cycle.status = SystemStatus.DELETED
        cycle.updated_by = deleted_by

        await self.db.commit()

        logger.info("Deleted academic cycle: %s", cycle_id)

    async def get_current_academic_cycle(
        self,
        today: date | None = None,
    ) -> AcademicCycleResponse | None:
        """Get the active cycle whose range contains today.

        Returns:
            Current academic cycle or None if there is none.
        """
        today = today or date.today()
        query = (
            select(AcademicCycle)
            .where(
                AcademicCycle.deleted_at.is_(None),
                AcademicCycle.status == SystemStatus.ACTIVE,
                AcademicCycle.start_date <= today,
                AcademicCycle.end_date >= today,
            )
            .order_by(AcademicCycle.start_date.desc())
            .limit(1)
        )
        result = await self.db.execute(query)
        cycle = result.scalars().first()

        if not cycle:
            return None

        term_count = await self._get_term_count(cycle.id)
        return self._to_response(cycle, term_count)

    async def get_academic_cycles_by_date_range(
        self,
        start_date: date,
        end_date: date,
        cycle_type: AcademicCycleType | None = None,
    ) -> list[AcademicCycleSummary]:
        """Get cycles overlapping [start_date, end_date].

        Raises:
            InvalidDateRangeError: If start date is not before end date.
        """
        validate_term_dates(start_date, end_date, subject="Date range")

        query = select(AcademicCycle).where(
            AcademicCycle.deleted_at.is_(None),
            AcademicCycle.start_date <= end_date,
            AcademicCycle.end_date >= start_date,
        )
        if cycle_type:
            query = query.where(AcademicCycle.type == cycle_type)

        result = await self.db.execute(query.order_by(AcademicCycle.start_date.asc()))
        return [self._to_summary(cycle) for cycle in result.scalars().all()]

    async def get_upcoming_cycles(
        self,
        limit: int = DEFAULT_UPCOMING_LIMIT,
        cycle_type: AcademicCycleType | None = None,
        today: date | None = None,
    ) -> list[AcademicCycleSummary]:
        """Get active cycles that start after today, soonest first.

        The limit is clamped to 1..20.
        """
        today = today or date.today()
        limit = max(1, min(limit, MAX_UPCOMING_LIMIT))

        query = select(AcademicCycle).where(
            AcademicCycle.deleted_at.is_(None),
            AcademicCycle.status == SystemStatus.ACTIVE,
            AcademicCycle.start_date > today,
        )
        if cycle_type:
            query = query.where(AcademicCycle.type == cycle_type)

        query = query.order_by(AcademicCycle.start_date.asc()).limit(limit)
        result = await self.db.execute(query)
        return [self._to_summary(cycle) for cycle in result.scalars().all()]

    async def _get_by_id(self, cycle_id: UUID | str) -> AcademicCycle:
        query = select(AcademicCycle).where(
            AcademicCycle.id == str(cycle_id),
            AcademicCycle.deleted_at.is_(None),
        )
        result = await self.db.execute(query)
        cycle = result.scalar_one_or_none()

        if not cycle:
            raise AcademicCycleNotFoundError(f"Academic cycle {cycle_id} not found")

        return cycle

    async def _ensure_code_available(self, code: str) -> None:
        query = select(AcademicCycle).where(AcademicCycle.code == code)
        result = await self.db.execute(query)
        if result.scalar_one_or_none():
            raise AcademicCycleConflictError(f"Academic cycle with code {code} already exists")

    async def _commit(self, conflict_message: str) -> None:
        # A concurrent writer can take the code between the check and the commit
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise AcademicCycleConflictError(conflict_message) from e

    async def _ensure_terms_fit(self, cycle_id: str, start: date, end: date) -> None:
        query = select(Term).where(
            Term.academic_cycle_id == str(cycle_id),
            or_(Term.start_date < start, Term.end_date > end),
        )
        result = await self.db.execute(query)
        term = result.scalars().first()
        if term:
            raise OutOfCycleRangeError(term.start_date, term.end_date, start, end)

    async def _get_term_count(self, cycle_id: str) -> int:
        query = select(func.count()).select_from(Term).where(
            Term.academic_cycle_id == str(cycle_id)
        )
        result = await self.db.execute(query)
        return result.scalar() or 0

    def _to_summary(self, cycle: AcademicCycle) -> AcademicCycleSummary:
        return AcademicCycleSummary(
            id=UUID(str(cycle.id)),
            code=cycle.code,
            name=cycle.name,
            type=cycle.type,
            start_date=cycle.start_date,
            end_date=cycle.end_date,
            status=cycle.status,
            duration_days=(cycle.end_date - cycle.start_date).days,
        )

    def _to_response(self, cycle: AcademicCycle, term_count: int) -> AcademicCycleResponse:
        return AcademicCycleResponse(
            **self._to_summary(cycle).model_dump(),
            description=cycle.description,
            created_by=cycle.created_by,
            updated_by=cycle.updated_by,
            created_at=cycle.created_at,
            term_count=term_count,
        )
