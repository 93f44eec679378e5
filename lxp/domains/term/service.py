# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Term service for managing terms inside academic cycles.

This module provides the TermService class for:
- Term CRUD operations
- Type/period, date order and cycle containment validation on every write
- Refusing deletion of terms that classes or grade books still use
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lxp.core.enums import SystemStatus
from lxp.domains.term.errors import (
    TermConflictError,
    TermDependencyError,
    TermNotFoundError,
)
from lxp.domains.term.validation import (
    validate_term_dates,
    validate_term_type_and_period,
    validate_within_cycle,
)
from lxp.infrastructure.database.models import AcademicCycle, Class, Course, GradeBook, Term
from lxp.models.term import (
    TermCreateRequest,
    TermFilters,
    TermResponse,
    TermUpdateRequest,
)

logger = logging.getLogger(__name__)


class TermService:
    """Service for managing terms.

    Attributes:
        db: Async database session.
        default_status: Status given to newly created terms.
    """

    def __init__(
        self,
        db: AsyncSession,
        default_status: SystemStatus = SystemStatus.ACTIVE,
    ) -> None:
        """Initialize term service.

        Args:
            db: Async database session.
            default_status: Status given to newly created terms.
        """
        self.db = db
        self.default_status = default_status

    async def create_term(self, request: TermCreateRequest) -> TermResponse:
        """Create a new term.

        Args:
            request: Term creation data.

        Returns:
            Created term.

        Raises:
            InvalidPeriodError: If the period is not legal for the type.
            InvalidDateRangeError: If start date is not before end date.
            TermConflictError: If the code is already used.
            TermNotFoundError: If the course or academic cycle does not exist.
            OutOfCycleRangeError: If the dates fall outside the cycle.
        """
        validate_term_type_and_period(request.term_type, request.term_period)
        validate_term_dates(request.start_date, request.end_date)

        await self._ensure_code_available(request.code)
        await self._ensure_course_exists(request.course_id)
        cycle = await self._get_cycle(request.academic_cycle_id)

        validate_within_cycle(
            request.start_date,
            request.end_date,
            cycle.start_date,
            cycle.end_date,
        )

        term = Term(
            code=request.code,
            name=request.name,
            description=request.description,
            term_type=request.term_type,
            term_period=request.term_period,
            start_date=request.start_date,
            end_date=request.end_date,
            course_id=str(request.course_id),
            academic_cycle_id=str(request.academic_cycle_id),
            status=self.default_status,
        )

        self.db.add(term)
        await self._commit(f"Term with code {request.code} already exists")
        await self.db.refresh(term)

        logger.info("Created term: %s (%s)", term.code, term.id)

        return self._to_response(term)

    async def get_term(self, term_id: UUID) -> TermResponse:
        """Get term by ID.

        Raises:
            TermNotFoundError: If term not found.
        """
        term = await self._get_by_id(term_id)
        return self._to_response(term)

    async def list_terms(
        self,
        filters: TermFilters | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[TermResponse], int]:
        """List terms, earliest first.

        Args:
            filters: Optional filters.
            page: 1-based page number.
            page_size: Items per page.

        Returns:
            Tuple of (page of terms, total count).
        """
        filters = filters or TermFilters()
        query = select(Term)

        if filters.course_id:
            query = query.where(Term.course_id == str(filters.course_id))
        if filters.academic_cycle_id:
            query = query.where(Term.academic_cycle_id == str(filters.academic_cycle_id))
        if filters.term_type:
            query = query.where(Term.term_type == filters.term_type)
        if filters.term_period:
            query = query.where(Term.term_period == filters.term_period)
        if filters.status:
            query = query.where(Term.status == filters.status)
        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.where(or_(Term.name.ilike(pattern), Term.code.ilike(pattern)))

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        query = (
            query.order_by(Term.start_date.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(query)
        terms = result.scalars().all()

        return [self._to_response(term) for term in terms], total

    async def update_term(self, term_id: UUID, request: TermUpdateRequest) -> TermResponse:
        """Update a term.

        Partial data is merged with the stored term before validation, so a
        new period is checked against the stored type (and vice versa) and
        new dates are checked against the stored or newly assigned cycle.

        Raises:
            TermNotFoundError: If the term, course or cycle is not found.
            TermConflictError: If the new code is already used.
            InvalidPeriodError: If the merged type/period is illegal.
            InvalidDateRangeError: If the merged dates are out of order.
            OutOfCycleRangeError: If the merged dates fall outside the cycle.
        """
        term = await self._get_by_id(term_id)

        if request.term_type or request.term_period:
            validate_term_type_and_period(
                request.term_type or term.term_type,
                request.term_period or term.term_period,
            )

        new_start = request.start_date or term.start_date
        new_end = request.end_date or term.end_date
        dates_changed = bool(request.start_date or request.end_date)

        if dates_changed:
            validate_term_dates(new_start, new_end)

        if request.code and request.code != term.code:
            await self._ensure_code_available(request.code)

        if request.course_id and str(request.course_id) != str(term.course_id):
            await self._ensure_course_exists(request.course_id)

        cycle_changed = (
            request.academic_cycle_id is not None
            and str(request.academic_cycle_id) != str(term.academic_cycle_id)
        )
        if dates_changed or cycle_changed:
            cycle = await self._get_cycle(request.academic_cycle_id or term.academic_cycle_id)
            validate_within_cycle(new_start, new_end, cycle.start_date, cycle.end_date)

        for field, value in request.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            if isinstance(value, UUID):
                value = str(value)
            setattr(term, field, value)

        await self._commit(f"Term with code {term.code} already exists")
        await self.db.refresh(term)

        logger.info("Updated term: %s", term_id)

        return self._to_response(term)

    async def delete_term(self, term_id: UUID) -> None:
        """Delete a term.

        Raises:
            TermNotFoundError: If term not found.
            TermDependencyError: If classes or grade books reference the term.
        """
        term = await self._get_by_id(term_id)

        class_count = await self._count(Class, Class.term_id == str(term_id))
        grade_book_count = await self._count(GradeBook, GradeBook.term_id == str(term_id))

        if class_count or grade_book_count:
            raise TermDependencyError(
                f"Cannot delete term with existing dependencies "
                f"({class_count} classes, {grade_book_count} grade books)"
            )

        await self.db.delete(term)
        await self.db.commit()

        logger.info("Deleted term: %s", term_id)

    async def _get_by_id(self, term_id: UUID | str) -> Term:
        query = select(Term).where(Term.id == str(term_id))
        result = await self.db.execute(query)
        term = result.scalar_one_or_none()

        if not term:
            raise TermNotFoundError(f"Term {term_id} not found")

        return term

    async def _get_cycle(self, cycle_id: UUID | str) -> AcademicCycle:
        query = select(AcademicCycle).where(
            AcademicCycle.id == str(cycle_id),
            AcademicCycle.deleted_at.is_(None),
        )
        result = await self.db.execute(query)
        cycle = result.scalar_one_or_none()

        if not cycle:
            raise TermNotFoundError(f"Academic cycle {cycle_id} not found")

        return cycle

    async def _ensure_course_exists(self, course_id: UUID | str) -> None:
        query = select(Course).where(Course.id == str(course_id))
        result = await self.db.execute(query)
        if not result.scalar_one_or_none():
            raise TermNotFoundError(f"Course {course_id} not found")

    async def _ensure_code_available(self, code: str) -> None:
        query = select(Term).where(Term.code == code)
        result = await self.db.execute(query)
        if result.scalar_one_or_none():
            raise TermConflictError(f"Term with code {code} already exists")

    async def _commit(self, conflict_message: str) -> None:
        # A concurrent writer can take the code between the check and the commit
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise TermConflictError(conflict_message) from e

    async def _count(self, model: type, condition) -> int:
        query = select(func.count()).select_from(model).where(condition)
        result = await self.db.execute(query)
        return result.scalar() or 0

    def _to_response(self, term: Term) -> TermResponse:
        return TermResponse(
            id=UUID(str(term.id)),
            code=term.code,
            name=term.name,
            description=term.description,
            term_type=term.term_type,
            term_period=term.term_period,
            start_date=term.start_date,
            end_date=term.end_date,
            course_id=UUID(str(term.course_id)),
            academic_cycle_id=UUID(str(term.academic_cycle_id)),
            status=term.status,
            created_at=term.created_at,
        )
