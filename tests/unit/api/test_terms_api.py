# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API tests for term endpoints."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from lxp.core.enums import TermPeriod, TermType, UserType
from lxp.domains.term import (
    InvalidDateRangeError,
    InvalidPeriodError,
    OutOfCycleRangeError,
    TermConflictError,
    TermDependencyError,
    TermNotFoundError,
)
from tests.helpers import make_term_response


@pytest.fixture
def term_payload() -> dict:
    return {
        "code": "FALL-2024",
        "name": "Fall 2024",
        "term_type": "SEMESTER",
        "term_period": "FALL",
        "start_date": "2024-09-01",
        "end_date": "2025-01-31",
        "course_id": str(uuid4()),
        "academic_cycle_id": str(uuid4()),
    }


@pytest.fixture
def mock_service():
    """Patch the term service used by the endpoints."""
    service = MagicMock()
    with patch("lxp.api.v1.terms._get_service", return_value=service):
        yield service


class TestTermsAPIRouting:
    """Tests for terms API routing."""

    def test_routes_registered(self, app):
        routes = [route.path for route in app.routes]

        assert "/api/v1/terms" in routes
        assert "/api/v1/terms/{term_id}" in routes


class TestCreateTerm:
    """Tests for POST /api/v1/terms."""

    def test_requires_authentication(self, client, term_payload, mock_service):
        response = client.post("/api/v1/terms", json=term_payload)

        assert response.status_code == 401

    def test_invalid_token_is_unauthenticated(self, client, term_payload, mock_service):
        response = client.post(
            "/api/v1/terms",
            json=term_payload,
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401

    @pytest.mark.parametrize(
        "user_type",
        [UserType.CAMPUS_TEACHER, UserType.CAMPUS_STUDENT, None],
    )
    def test_forbidden_user_types(self, client, auth_headers, term_payload, mock_service, user_type):
        response = client.post("/api/v1/terms", json=term_payload, headers=auth_headers(user_type))

        assert response.status_code == 403
        mock_service.create_term.assert_not_called()

    @pytest.mark.parametrize(
        "user_type",
        [
            UserType.SYSTEM_ADMIN,
            UserType.SYSTEM_MANAGER,
            UserType.CAMPUS_ADMIN,
            UserType.CAMPUS_COORDINATOR,
        ],
    )
    def test_success(self, client, auth_headers, term_payload, mock_service, user_type):
        created = make_term_response(code="FALL-2024")
        mock_service.create_term = AsyncMock(return_value=created)

        response = client.post("/api/v1/terms", json=term_payload, headers=auth_headers(user_type))

        assert response.status_code == 201
        assert response.json()["code"] == "FALL-2024"
        assert response.json()["term_period"] == "FALL"

    def test_invalid_period_is_bad_request(self, client, auth_headers, term_payload, mock_service):
        mock_service.create_term = AsyncMock(
            side_effect=InvalidPeriodError(TermType.QUARTER, TermPeriod.FALL)
        )
        term_payload.update(term_type="QUARTER", term_period="FALL")

        response = client.post("/api/v1/terms", json=term_payload, headers=auth_headers())

        assert response.status_code == 400
        assert response.json()["detail"] == 'Invalid period "FALL" for term type "QUARTER"'

    def test_invalid_date_range_is_bad_request(self, client, auth_headers, term_payload, mock_service):
        mock_service.create_term = AsyncMock(
            side_effect=InvalidDateRangeError("2025-01-31", "2024-09-01")
        )

        response = client.post("/api/v1/terms", json=term_payload, headers=auth_headers())

        assert response.status_code == 400

    def test_out_of_cycle_range_is_bad_request(self, client, auth_headers, term_payload, mock_service):
        mock_service.create_term = AsyncMock(
            side_effect=OutOfCycleRangeError("2024-08-01", "2025-01-31", "2024-09-01", "2025-06-30")
        )

        response = client.post("/api/v1/terms", json=term_payload, headers=auth_headers())

        assert response.status_code == 400

    def test_unknown_enum_is_rejected(self, client, auth_headers, term_payload, mock_service):
        term_payload["term_period"] = "AUTUMN"

        response = client.post("/api/v1/terms", json=term_payload, headers=auth_headers())

        assert response.status_code == 422
        mock_service.create_term.assert_not_called()

    def test_missing_cycle_is_not_found(self, client, auth_headers, term_payload, mock_service):
        mock_service.create_term = AsyncMock(side_effect=TermNotFoundError("Academic cycle not found"))

        response = client.post("/api/v1/terms", json=term_payload, headers=auth_headers())

        assert response.status_code == 404

    def test_duplicate_code_is_conflict(self, client, auth_headers, term_payload, mock_service):
        mock_service.create_term = AsyncMock(side_effect=TermConflictError("Term code already exists"))

        response = client.post("/api/v1/terms", json=term_payload, headers=auth_headers())

        assert response.status_code == 409


class TestReadTerms:
    """Tests for the read endpoints."""

    def test_list_passes_filters(self, client, auth_headers, mock_service):
        mock_service.list_terms = AsyncMock(return_value=([make_term_response()], 1))
        cycle_id = uuid4()

        response = client.get(
            "/api/v1/terms",
            params={
                "academic_cycle_id": str(cycle_id),
                "term_type": "SEMESTER",
                "status": "ACTIVE",
                "page": 2,
                "page_size": 5,
            },
            headers=auth_headers(UserType.CAMPUS_STUDENT),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["page"] == 2
        filters = mock_service.list_terms.call_args.args[0]
        assert filters.academic_cycle_id == cycle_id
        assert filters.term_type == TermType.SEMESTER
        assert mock_service.list_terms.call_args.kwargs == {"page": 2, "page_size": 5}

    def test_page_size_is_bounded(self, client, auth_headers, mock_service):
        response = client.get("/api/v1/terms", params={"page_size": 101}, headers=auth_headers())

        assert response.status_code == 422

    def test_get_not_found(self, client, auth_headers, mock_service):
        mock_service.get_term = AsyncMock(side_effect=TermNotFoundError("missing"))

        response = client.get(f"/api/v1/terms/{uuid4()}", headers=auth_headers())

        assert response.status_code == 404
        assert response.json()["detail"] == "Term not found"


class TestUpdateAndDeleteTerm:
    """Tests for PUT and DELETE /api/v1/terms/{term_id}."""

    def test_update_invalid_period(self, client, auth_headers, mock_service):
        mock_service.update_term = AsyncMock(
            side_effect=InvalidPeriodError(TermType.SEMESTER, TermPeriod.FIRST_QUARTER)
        )

        response = client.put(
            f"/api/v1/terms/{uuid4()}",
            json={"term_period": "FIRST_QUARTER"},
            headers=auth_headers(UserType.CAMPUS_COORDINATOR),
        )

        assert response.status_code == 400

    def test_coordinator_cannot_delete(self, client, auth_headers, mock_service):
        response = client.delete(
            f"/api/v1/terms/{uuid4()}",
            headers=auth_headers(UserType.CAMPUS_COORDINATOR),
        )

        assert response.status_code == 403

    def test_delete_success(self, client, auth_headers, mock_service):
        mock_service.delete_term = AsyncMock(return_value=None)

        response = client.delete(
            f"/api/v1/terms/{uuid4()}",
            headers=auth_headers(UserType.CAMPUS_ADMIN),
        )

        assert response.status_code == 204

    def test_delete_with_dependencies(self, client, auth_headers, mock_service):
        mock_service.delete_term = AsyncMock(
            side_effect=TermDependencyError("Cannot delete term with 2 classes")
        )

        response = client.delete(f"/api/v1/terms/{uuid4()}", headers=auth_headers())

        assert response.status_code == 412
