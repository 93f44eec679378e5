# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API tests for grade book endpoints."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from lxp.api.v1 import grade_books
from lxp.core.enums import UserType
from lxp.domains.grade import (
    GradeBookConflictError,
    GradeBookNotFoundError,
    StudentGradeConflictError,
    StudentNotFoundError,
)
from lxp.models.grade import GradeBookFinalGrades, StudentFinalGrade, StudentProgressEntry
from tests.helpers import make_grade_book_response, make_student_grade_response


@pytest.fixture
def mock_service(app):
    """Override the grade service dependency."""
    service = MagicMock()
    app.dependency_overrides[grade_books._get_service] = lambda: service
    return service


class TestGradeBooksAPIRouting:
    """Tests for grade books API routing."""

    def test_routes_registered(self, app):
        routes = [route.path for route in app.routes]

        assert "/api/v1/grade-books" in routes
        assert "/api/v1/grade-books/{grade_book_id}" in routes
        assert "/api/v1/grade-books/{grade_book_id}/recalculate" in routes
        assert "/api/v1/grade-books/{grade_book_id}/students" in routes
        assert "/api/v1/grade-books/{grade_book_id}/students/{student_id}" in routes
        assert "/api/v1/grade-books/classes/{class_id}/final-grades" in routes


class TestGradeBookEndpoints:
    """Tests for grade book CRUD."""

    def test_teacher_creates_grade_book(self, client, auth_headers, mock_service):
        mock_service.create_grade_book = AsyncMock(return_value=make_grade_book_response())

        response = client.post(
            "/api/v1/grade-books",
            json={
                "class_id": str(uuid4()),
                "term_id": str(uuid4()),
                "calculation_rules": {"weights": {"exam": 2, "homework": 1}},
            },
            headers=auth_headers(UserType.CAMPUS_TEACHER),
        )

        assert response.status_code == 201
        assert response.json()["calculation_rules"]["weights"] == {"exam": 2.0, "homework": 1.0}
        assert response.json()["student_grades"] == []

    def test_student_cannot_create(self, client, auth_headers, mock_service):
        response = client.post(
            "/api/v1/grade-books",
            json={"class_id": str(uuid4()), "term_id": str(uuid4())},
            headers=auth_headers(UserType.CAMPUS_STUDENT),
        )

        assert response.status_code == 403

    def test_missing_class(self, client, auth_headers, mock_service):
        mock_service.create_grade_book = AsyncMock(side_effect=GradeBookNotFoundError("Class not found"))

        response = client.post(
            "/api/v1/grade-books",
            json={"class_id": str(uuid4()), "term_id": str(uuid4())},
            headers=auth_headers(),
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Class not found"

    def test_second_book_for_term(self, client, auth_headers, mock_service):
        mock_service.create_grade_book = AsyncMock(
            side_effect=GradeBookConflictError("Class already has a grade book for this term")
        )

        response = client.post(
            "/api/v1/grade-books",
            json={"class_id": str(uuid4()), "term_id": str(uuid4())},
            headers=auth_headers(),
        )

        assert response.status_code == 409

    def test_huge_weight_rejected(self, client, auth_headers, mock_service):
        mock_service.create_grade_book = AsyncMock()

        response = client.post(
            "/api/v1/grade-books",
            json={
                "class_id": str(uuid4()),
                "term_id": str(uuid4()),
                "calculation_rules": {"weights": {"exam": 1e30}},
            },
            headers=auth_headers(),
        )

        assert response.status_code == 422
        mock_service.create_grade_book.assert_not_called()

    def test_create_with_grading_scale(self, client, auth_headers, mock_service):
        scale_id = uuid4()
        mock_service.create_grade_book = AsyncMock(
            return_value=make_grade_book_response(grading_scale_id=scale_id)
        )

        response = client.post(
            "/api/v1/grade-books",
            json={
                "class_id": str(uuid4()),
                "term_id": str(uuid4()),
                "grading_scale_id": str(scale_id),
            },
            headers=auth_headers(),
        )

        assert response.status_code == 201
        assert response.json()["grading_scale_id"] == str(scale_id)
        request = mock_service.create_grade_book.call_args.args[0]
        assert request.grading_scale_id == scale_id

    def test_update_with_unknown_scale(self, client, auth_headers, mock_service):
        scale_id = uuid4()
        mock_service.update_grade_book = AsyncMock(
            side_effect=GradeBookNotFoundError(f"Grading scale {scale_id} not found")
        )

        response = client.put(
            f"/api/v1/grade-books/{uuid4()}",
            json={"grading_scale_id": str(scale_id)},
            headers=auth_headers(),
        )

        assert response.status_code == 404
        assert response.json()["detail"] == f"Grading scale {scale_id} not found"

        assert response.status_code == 409

    def test_teacher_cannot_delete(self, client, auth_headers, mock_service):
        response = client.delete(
            f"/api/v1/grade-books/{uuid4()}",
            headers=auth_headers(UserType.CAMPUS_TEACHER),
        )

        assert response.status_code == 403

    def test_get_not_found(self, client, auth_headers, mock_service):
        mock_service.get_grade_book = AsyncMock(side_effect=GradeBookNotFoundError("missing"))

        response = client.get(f"/api/v1/grade-books/{uuid4()}", headers=auth_headers())

        assert response.status_code == 404
        assert response.json()["detail"] == "Grade book not found"

    def test_recalculate(self, client, auth_headers, mock_service):
        book_id = uuid4()
        student_id = uuid4()
        mock_service.recalculate_grade_book = AsyncMock(
            return_value=GradeBookFinalGrades(
                grade_book_id=book_id,
                grades=[StudentFinalGrade(student_id=student_id, final_grade=86.67)],
            )
        )

        response = client.post(f"/api/v1/grade-books/{book_id}/recalculate", headers=auth_headers())

        assert response.status_code == 200
        assert response.json()["grades"] == [
            {"student_id": str(student_id), "final_grade": 86.67, "letter_grade": None}
        ]

    def test_class_final_grades(self, client, auth_headers, mock_service):
        class_id = uuid4()
        mock_service.calculate_class_grades = AsyncMock(return_value=[])

        response = client.get(
            f"/api/v1/grade-books/classes/{class_id}/final-grades",
            headers=auth_headers(UserType.CAMPUS_TEACHER),
        )

        assert response.status_code == 200
        mock_service.calculate_class_grades.assert_awaited_once_with(class_id)


class TestStudentGradeEndpoints:
    """Tests for student grade endpoints."""

    def test_record_grade(self, client, auth_headers, mock_service):
        book_id = uuid4()
        mock_service.create_student_grade = AsyncMock(
            return_value=make_student_grade_response(grade_book_id=book_id)
        )

        response = client.post(
            f"/api/v1/grade-books/{book_id}/students",
            json={"student_id": str(uuid4()), "assessment_grades": {"exam": 90, "homework": 80}},
            headers=auth_headers(UserType.CAMPUS_TEACHER),
        )

        assert response.status_code == 201
        assert response.json()["final_grade"] == 86.67

    def test_record_grade_unknown_student(self, client, auth_headers, mock_service):
        mock_service.create_student_grade = AsyncMock(side_effect=StudentNotFoundError("Student not found"))

        response = client.post(
            f"/api/v1/grade-books/{uuid4()}/students",
            json={"student_id": str(uuid4())},
            headers=auth_headers(),
        )

        assert response.status_code == 404

    def test_record_grade_twice(self, client, auth_headers, mock_service):
        mock_service.create_student_grade = AsyncMock(
            side_effect=StudentGradeConflictError("Student already has a grade in this grade book")
        )

        response = client.post(
            f"/api/v1/grade-books/{uuid4()}/students",
            json={"student_id": str(uuid4())},
            headers=auth_headers(),
        )

        assert response.status_code == 409

    def test_attendance_bounds(self, client, auth_headers, mock_service):
        response = client.post(
            f"/api/v1/grade-books/{uuid4()}/students",
            json={"student_id": str(uuid4()), "attendance": 120},
            headers=auth_headers(),
        )

        assert response.status_code == 422

    def test_huge_score_rejected(self, client, auth_headers, mock_service):
        mock_service.create_student_grade = AsyncMock()

        response = client.post(
            f"/api/v1/grade-books/{uuid4()}/students",
            json={"student_id": str(uuid4()), "assessment_grades": {"midterm": 1e30}},
            headers=auth_headers(),
        )

        assert response.status_code == 422
        mock_service.create_student_grade.assert_not_called()

    def test_infinite_score_rejected(self, client, auth_headers, mock_service):
        mock_service.create_student_grade = AsyncMock()
        body = '{"student_id": "' + str(uuid4()) + '", "assessment_grades": {"midterm": Infinity}}'

        response = client.post(
            f"/api/v1/grade-books/{uuid4()}/students",
            content=body,
            headers={**auth_headers(), "Content-Type": "application/json"},
        )

        assert response.status_code == 422
        mock_service.create_student_grade.assert_not_called()

    def test_update_rejects_infinite_score(self, client, auth_headers, mock_service):
        mock_service.update_student_grade = AsyncMock()

        response = client.put(
            f"/api/v1/grade-books/{uuid4()}/students/{uuid4()}",
            content='{"assessment_grades": {"final": -Infinity}}',
            headers={**auth_headers(), "Content-Type": "application/json"},
        )

        assert response.status_code == 422
        mock_service.update_student_grade.assert_not_called()

        assert response.status_code == 422

    def test_student_listing_is_scoped_to_self(self, client, auth_headers, mock_service):
        own_id = uuid4()
        mock_service.get_student_id_for_user = AsyncMock(return_value=str(own_id))
        mock_service.list_student_grades = AsyncMock(return_value=([], 0))

        response = client.get(
            f"/api/v1/grade-books/{uuid4()}/students",
            params={"student_id": str(uuid4())},
            headers=auth_headers(UserType.CAMPUS_STUDENT),
        )

        assert response.status_code == 200
        filters = mock_service.list_student_grades.call_args.args[0]
        assert filters.student_id == own_id

    def test_student_without_profile(self, client, auth_headers, mock_service):
        mock_service.get_student_id_for_user = AsyncMock(return_value=None)

        response = client.get(
            f"/api/v1/grade-books/{uuid4()}/students",
            headers=auth_headers(UserType.CAMPUS_STUDENT),
        )

        assert response.status_code == 403


class TestStudentProgress:
    """Tests for GET /classes/{class_id}/students/{student_id}/progress."""

    def test_student_sees_own_progress(self, client, auth_headers, mock_service):
        student_id = uuid4()
        mock_service.get_student_id_for_user = AsyncMock(return_value=str(student_id))
        mock_service.get_student_progress = AsyncMock(
            return_value=[
                StudentProgressEntry(
                    grade_book_id=uuid4(),
                    term_id=uuid4(),
                    grades=[make_student_grade_response(student_id=student_id)],
                )
            ]
        )

        response = client.get(
            f"/api/v1/grade-books/classes/{uuid4()}/students/{student_id}/progress",
            headers=auth_headers(UserType.CAMPUS_STUDENT),
        )

        assert response.status_code == 200
        assert response.json()[0]["grades"][0]["student_id"] == str(student_id)

    def test_student_cannot_see_others(self, client, auth_headers, mock_service):
        mock_service.get_student_id_for_user = AsyncMock(return_value=str(uuid4()))
        mock_service.get_student_progress = AsyncMock(return_value=[])

        response = client.get(
            f"/api/v1/grade-books/classes/{uuid4()}/students/{uuid4()}/progress",
            headers=auth_headers(UserType.CAMPUS_STUDENT),
        )

        assert response.status_code == 403
        mock_service.get_student_progress.assert_not_called()

    def test_teacher_sees_any_student(self, client, auth_headers, mock_service):
        mock_service.get_student_progress = AsyncMock(return_value=[])

        response = client.get(
            f"/api/v1/grade-books/classes/{uuid4()}/students/{uuid4()}/progress",
            headers=auth_headers(UserType.CAMPUS_TEACHER),
        )

        assert response.status_code == 200
        assert response.json() == []
