# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade service for grade books and student grades.

This module provides the GradeService class for:
- Grade book CRUD operations (one grade book per class and term)
- Recording and updating student grades, unique per grade book and student
- Computing weighted final grades for a class or a grade book, and letter
  grades from the grade book's grading scale
- Student progress across a class's grade books
"""

from __future__ import annotations

import logging
from collections import defaultdict
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lxp.core.enums import SystemStatus
from lxp.domains.grade.aggregation import (
    FINAL_GRADE_PLACES,
    calculate_final_grade,
    letter_grade_for,
)
from lxp.infrastructure.database.models import (
    Class,
    GradeBook,
    GradingScale,
    Student,
    StudentGrade,
    Term,
)
from lxp.models.grade import (
    CalculationRules,
    GradeBookCreateRequest,
    GradeBookFinalGrades,
    GradeBookResponse,
    GradeBookSummary,
    GradeBookUpdateRequest,
    StudentFinalGrade,
    StudentGradeCreateRequest,
    StudentGradeFilters,
    StudentGradeResponse,
    StudentGradeUpdateRequest,
    StudentProgressEntry,
)

logger = logging.getLogger(__name__)


class GradeServiceError(Exception):
    """Base exception for grade service errors."""

    pass


class GradeBookNotFoundError(GradeServiceError):
    """Raised when a grade book, or the class or term it needs, is not found."""

    pass


class GradeBookConflictError(GradeServiceError):
    """Raised when a class already has a grade book for the term."""

    pass


class StudentNotFoundError(GradeServiceError):
    """Raised when a student profile is not found."""

    pass


class StudentGradeNotFoundError(GradeServiceError):
    """Raised when no grade exists for the grade book and student."""

    pass


class StudentGradeConflictError(GradeServiceError):
    """Raised when the student already has a grade in the grade book."""

    pass


class GradeService:
    """Service for grade books, student grades and final grade calculation.

    Attributes:
        db: Async database session.
        final_grade_places: Decimal places kept in computed final grades.
    """

    def __init__(self, db: AsyncSession, final_grade_places: int = FINAL_GRADE_PLACES) -> None:
        """Initialize grade service.

        Args:
            db: Async database session.
            final_grade_places: Decimal places kept in computed final grades.
        """
        self.db = db
        self.final_grade_places = final_grade_places

    # =========================================================================
    # Grade books
    # =========================================================================

    async def create_grade_book(
        self,
        request: GradeBookCreateRequest,
        created_by: str | None = None,
    ) -> GradeBookResponse:
        """Create a grade book for a class in a term.

        Raises:
            GradeBookNotFoundError: If the class, term or grading scale does
                not exist.
            GradeBookConflictError: If the class already has one for the term.
        """
        await self._ensure_exists(Class, request.class_id, "Class")
        await self._ensure_exists(Term, request.term_id, "Term")
        if request.grading_scale_id:
            await self._ensure_exists(GradingScale, request.grading_scale_id, "Grading scale")

        existing_query = select(GradeBook).where(
            GradeBook.class_id == str(request.class_id),
            GradeBook.term_id == str(request.term_id),
        )
        result = await self.db.execute(existing_query)
        if result.scalar_one_or_none():
            raise GradeBookConflictError(
                f"Class {request.class_id} already has a grade book for term {request.term_id}"
            )

        grade_book = GradeBook(
            class_id=str(request.class_id),
            term_id=str(request.term_id),
            calculation_rules=request.calculation_rules.model_dump(),
            grading_scale_id=str(request.grading_scale_id) if request.grading_scale_id else None,
            created_by_id=created_by,
        )

        self.db.add(grade_book)
        await self._commit(
            GradeBookConflictError(
                f"Class {request.class_id} already has a grade book for term {request.term_id}"
            )
        )
        await self.db.refresh(grade_book)

        logger.info("Created grade book %s for class %s", grade_book.id, request.class_id)

        return self._to_grade_book_response(grade_book, [])

    async def get_grade_book(self, grade_book_id: UUID) -> GradeBookResponse:
        """Get a grade book with its student grades.

        Raises:
            GradeBookNotFoundError: If not found.
        """
        grade_book = await self._get_grade_book(grade_book_id)
        grades = await self._get_student_grades(grade_book.id)
        return self._to_grade_book_response(grade_book, grades)

    async def update_grade_book(
        self,
        grade_book_id: UUID,
        request: GradeBookUpdateRequest,
        updated_by: str | None = None,
    ) -> GradeBookResponse:
        """Replace a grade book's calculation rules or grading scale.

        Stored final and letter grades are left as they are; call
        recalculate_grade_book() to apply the new weights or scale.

        Raises:
            GradeBookNotFoundError: If the grade book or grading scale is not
                found.
        """
        grade_book = await self._get_grade_book(grade_book_id)

        if request.calculation_rules is not None:
            grade_book.calculation_rules = request.calculation_rules.model_dump()
        if "grading_scale_id" in request.model_fields_set:
            if request.grading_scale_id is None:
                grade_book.grading_scale_id = None
            else:
                await self._ensure_exists(GradingScale, request.grading_scale_id, "Grading scale")
                grade_book.grading_scale_id = str(request.grading_scale_id)
        grade_book.updated_by_id = updated_by

        await self.db.commit()
        await self.db.refresh(grade_book)

        logger.info("Updated grade book rules: %s", grade_book_id)

        grades = await self._get_student_grades(grade_book.id)
        return self._to_grade_book_response(grade_book, grades)

    async def delete_grade_book(self, grade_book_id: UUID) -> None:
        """Delete a grade book and its student grades.

        Raises:
            GradeBookNotFoundError: If not found.
        """
        grade_book = await self._get_grade_book(grade_book_id)

        await self.db.delete(grade_book)
        await self.db.commit()

        logger.info("Deleted grade book: %s", grade_book_id)

    async def list_grade_books(
        self,
        class_id: UUID | None = None,
        term_id: UUID | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[GradeBookSummary], int]:
        """List grade books, newest first.

        Returns:
            Tuple of (page of grade books, total count).
        """
        query = select(GradeBook)
        if class_id:
            query = query.where(GradeBook.class_id == str(class_id))
        if term_id:
            query = query.where(GradeBook.term_id == str(term_id))

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        query = (
            query.order_by(GradeBook.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(query)
        grade_books = result.scalars().all()

        return [self._to_grade_book_summary(book) for book in grade_books], total

    # =========================================================================
    # Student grades
    # =========================================================================

    async def create_student_grade(
        self,
        grade_book_id: UUID,
        request: StudentGradeCreateRequest,
    ) -> StudentGradeResponse:
        """Record a student's grades in a grade book.

        The final grade is computed from the grade book weights unless the
        request supplies one. Without an explicit letter grade, a grade
        book with a grading scale derives it from the final grade.

        Raises:
            GradeBookNotFoundError: If the grade book does not exist.
            StudentNotFoundError: If the student does not exist.
            StudentGradeConflictError: If the student already has a grade here.
        """
        grade_book = await self._get_grade_book(grade_book_id)

        student_query = select(Student).where(Student.id == str(request.student_id))
        result = await self.db.execute(student_query)
        if not result.scalar_one_or_none():
            raise StudentNotFoundError(f"Student {request.student_id} not found")

        if await self._find_student_grade(grade_book.id, request.student_id):
            raise StudentGradeConflictError(
                f"Student {request.student_id} already has a grade in grade book {grade_book_id}"
            )

        final_grade = request.final_grade
        if final_grade is None:
            final_grade = self._final_grade(request.assessment_grades, grade_book)

        letter_grade = request.letter_grade
        if letter_grade is None:
            ranges = await self._get_scale_ranges(grade_book)
            if ranges is not None:
                letter_grade = letter_grade_for(final_grade, ranges)

        student_grade = StudentGrade(
            grade_book_id=str(grade_book.id),
            student_id=str(request.student_id),
            assessment_grades=dict(request.assessment_grades),
            final_grade=final_grade,
            letter_grade=letter_grade,
            attendance=request.attendance,
            comments=request.comments,
            status=SystemStatus.ACTIVE,
        )

        self.db.add(student_grade)
        await self._commit(
            StudentGradeConflictError(
                f"Student {request.student_id} already has a grade in grade book {grade_book_id}"
            )
        )
        await self.db.refresh(student_grade)

        logger.info(
            "Recorded grade for student %s in grade book %s: %s",
            request.student_id,
            grade_book_id,
            final_grade,
        )

        return self._to_student_grade_response(student_grade)

    async def update_student_grade(
        self,
        grade_book_id: UUID,
        student_id: UUID,
        request: StudentGradeUpdateRequest,
    ) -> StudentGradeResponse:
        """Update a student's grade record.

        Changing assessment grades without an explicit final grade
        recomputes the final grade. When the final grade changes and no
        letter grade is given, the grading scale re-derives the letter.

        Raises:
            GradeBookNotFoundError: If the grade book does not exist.
            StudentGradeNotFoundError: If the student has no grade here.
        """
        grade_book = await self._get_grade_book(grade_book_id)

        student_grade = await self._find_student_grade(grade_book.id, student_id)
        if not student_grade:
            raise StudentGradeNotFoundError(
                f"No grade for student {student_id} in grade book {grade_book_id}"
            )

        if request.assessment_grades is not None:
            student_grade.assessment_grades = dict(request.assessment_grades)
            if request.final_grade is None:
                student_grade.final_grade = self._final_grade(
                    request.assessment_grades,
                    grade_book,
                )
        if request.final_grade is not None:
            student_grade.final_grade = request.final_grade
        if request.letter_grade is not None:
            student_grade.letter_grade = request.letter_grade
        elif request.assessment_grades is not None or request.final_grade is not None:
            ranges = await self._get_scale_ranges(grade_book)
            if ranges is not None and student_grade.final_grade is not None:
                student_grade.letter_grade = letter_grade_for(student_grade.final_grade, ranges)
        if request.attendance is not None:
            student_grade.attendance = request.attendance
        if request.comments is not None:
            student_grade.comments = request.comments
        if request.status is not None:
            student_grade.status = request.status

        await self.db.commit()
        await self.db.refresh(student_grade)

        logger.info("Updated grade for student %s in grade book %s", student_id, grade_book_id)

        return self._to_student_grade_response(student_grade)

    async def list_student_grades(
        self,
        filters: StudentGradeFilters | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[StudentGradeResponse], int]:
        """List student grades, newest first.

        Returns:
            Tuple of (page of grades, total count).
        """
        filters = filters or StudentGradeFilters()
        query = select(StudentGrade)

        if filters.grade_book_id:
            query = query.where(StudentGrade.grade_book_id == str(filters.grade_book_id))
        if filters.student_id:
            query = query.where(StudentGrade.student_id == str(filters.student_id))
        if filters.status:
            query = query.where(StudentGrade.status == filters.status)
        if filters.min_final_grade is not None:
            query = query.where(StudentGrade.final_grade >= filters.min_final_grade)

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        query = (
            query.order_by(StudentGrade.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(query)
        grades = result.scalars().all()

        return [self._to_student_grade_response(grade) for grade in grades], total

    # =========================================================================
    # Calculation
    # =========================================================================

    async def calculate_class_grades(self, class_id: UUID) -> list[GradeBookFinalGrades]:
        """Compute every student's final grade in each grade book of a class.

        Read-only: nothing is written back.
        """
        query = (
            select(GradeBook)
            .where(GradeBook.class_id == str(class_id))
            .options(selectinload(GradeBook.student_grades))
        )
        result = await self.db.execute(query)
        grade_books = result.scalars().all()

        class_grades = []
        for book in grade_books:
            ranges = await self._get_scale_ranges(book)
            class_grades.append(
                GradeBookFinalGrades(
                    grade_book_id=UUID(str(book.id)),
                    grades=[
                        self._to_final_grade(
                            grade.student_id,
                            self._final_grade(grade.assessment_grades, book),
                            ranges,
                        )
                        for grade in book.student_grades
                    ],
                )
            )
        return class_grades

    async def recalculate_grade_book(self, grade_book_id: UUID) -> GradeBookFinalGrades:
        """Recompute and store every student's final grade in a grade book.

        Letter grades are re-derived too when the grade book has a scale.

        Raises:
            GradeBookNotFoundError: If not found.
        """
        grade_book = await self._get_grade_book(grade_book_id)
        grades = await self._get_student_grades(grade_book.id)
        ranges = await self._get_scale_ranges(grade_book)

        results = []
        for grade in grades:
            final = self._to_final_grade(
                grade.student_id,
                self._final_grade(grade.assessment_grades, grade_book),
                ranges,
            )
            grade.final_grade = final.final_grade
            if ranges is not None:
                grade.letter_grade = final.letter_grade
            results.append(final)

        await self.db.commit()

        logger.info("Recalculated %d final grades in grade book %s", len(results), grade_book_id)

        return GradeBookFinalGrades(grade_book_id=UUID(str(grade_book.id)), grades=results)

    async def get_student_progress(
        self,
        student_id: UUID,
        class_id: UUID,
    ) -> list[StudentProgressEntry]:
        """Get a student's grades in each grade book of a class."""
        books_query = (
            select(GradeBook)
            .where(GradeBook.class_id == str(class_id))
            .order_by(GradeBook.created_at.asc())
        )
        books_result = await self.db.execute(books_query)
        grade_books = books_result.scalars().all()

        grades_query = (
            select(StudentGrade)
            .join(GradeBook, StudentGrade.grade_book_id == GradeBook.id)
            .where(
                GradeBook.class_id == str(class_id),
                StudentGrade.student_id == str(student_id),
            )
        )
        grades_result = await self.db.execute(grades_query)

        by_book: dict[str, list[StudentGrade]] = defaultdict(list)
        for grade in grades_result.scalars().all():
            by_book[str(grade.grade_book_id)].append(grade)

        return [
            StudentProgressEntry(
                grade_book_id=UUID(str(book.id)),
                term_id=UUID(str(book.term_id)),
                grades=[
                    self._to_student_grade_response(grade)
                    for grade in by_book.get(str(book.id), [])
                ],
            )
            for book in grade_books
        ]

    async def get_student_id_for_user(self, user_id: str) -> str | None:
        """Resolve the student profile id of a platform user."""
        query = select(Student.id).where(Student.user_id == user_id)
        result = await self.db.execute(query)
        student_id = result.scalar_one_or_none()
        return str(student_id) if student_id else None

    # =========================================================================
    # Helpers
    # =========================================================================

    def _final_grade(self, assessment_grades: dict[str, float], grade_book: GradeBook) -> float:
        return calculate_final_grade(
            assessment_grades or {},
            grade_book.weights,
            places=self.final_grade_places,
        )

    def _to_final_grade(
        self,
        student_id: str,
        final_grade: float,
        ranges: list[dict] | None,
    ) -> StudentFinalGrade:
        return StudentFinalGrade(
            student_id=UUID(str(student_id)),
            final_grade=final_grade,
            letter_grade=letter_grade_for(final_grade, ranges) if ranges is not None else None,
        )

    async def _get_scale_ranges(self, grade_book: GradeBook) -> list[dict] | None:
        """Ranges of the grade book's grading scale, or None without one."""
        if grade_book.grading_scale_id is None:
            return None

        query = select(GradingScale.ranges).where(
            GradingScale.id == str(grade_book.grading_scale_id)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _commit(self, conflict: GradeServiceError) -> None:
        # The unique constraints catch writers racing past the existence checks
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise conflict from e

    async def _get_grade_book(self, grade_book_id: UUID | str) -> GradeBook:
        query = select(GradeBook).where(GradeBook.id == str(grade_book_id))
        result = await self.db.execute(query)
        grade_book = result.scalar_one_or_none()

        if not grade_book:
            raise GradeBookNotFoundError(f"Grade book {grade_book_id} not found")

        return grade_book

    async def _get_student_grades(self, grade_book_id: str) -> list[StudentGrade]:
        query = (
            select(StudentGrade)
            .where(StudentGrade.grade_book_id == str(grade_book_id))
            .order_by(StudentGrade.created_at.asc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _find_student_grade(
        self,
        grade_book_id: str,
        student_id: UUID | str,
    ) -> StudentGrade | None:
        query = select(StudentGrade).where(
            StudentGrade.grade_book_id == str(grade_book_id),
            StudentGrade.student_id == str(student_id),
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _ensure_exists(self, model: type, entity_id: UUID, label: str) -> None:
        query = select(model.id).where(model.id == str(entity_id))
        result = await self.db.execute(query)
        if not result.scalar_one_or_none():
            raise GradeBookNotFoundError(f"{label} {entity_id} not found")

    def _to_grade_book_summary(self, grade_book: GradeBook) -> GradeBookSummary:
        return GradeBookSummary(
            id=UUID(str(grade_book.id)),
            class_id=UUID(str(grade_book.class_id)),
            term_id=UUID(str(grade_book.term_id)),
            calculation_rules=CalculationRules(weights=grade_book.weights),
            grading_scale_id=(
                UUID(str(grade_book.grading_scale_id)) if grade_book.grading_scale_id else None
            ),
            created_at=grade_book.created_at,
        )

    def _to_grade_book_response(
        self,
        grade_book: GradeBook,
        grades: list[StudentGrade],
    ) -> GradeBookResponse:
        return GradeBookResponse(
            **self._to_grade_book_summary(grade_book).model_dump(),
            created_by_id=grade_book.created_by_id,
            updated_by_id=grade_book.updated_by_id,
            student_grades=[self._to_student_grade_response(grade) for grade in grades],
        )

    def _to_student_grade_response(self, grade: StudentGrade) -> StudentGradeResponse:
        return StudentGradeResponse(
            id=UUID(str(grade.id)),
            grade_book_id=UUID(str(grade.grade_book_id)),
            student_id=UUID(str(grade.student_id)),
            assessment_grades=dict(grade.assessment_grades or {}),
            final_grade=grade.final_grade,
            letter_grade=grade.letter_grade,
            attendance=grade.attendance,
            comments=grade.comments,
            status=grade.status,
        )
