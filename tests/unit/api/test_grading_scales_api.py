# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API tests for grading scale endpoints."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from lxp.core.enums import SystemStatus, UserType
from lxp.domains.grading_scale import GradingScaleNotFoundError, GradingScaleValidationError
from tests.helpers import make_grading_scale_response


@pytest.fixture
def mock_service():
    """Patch the grading scale service used by the endpoints."""
    service = MagicMock()
    with patch("lxp.api.v1.grading_scales._get_service", return_value=service):
        yield service


class TestGradingScalesAPIRouting:
    """Tests for grading scales API routing."""

    def test_routes_registered(self, app):
        routes = [route.path for route in app.routes]

        assert "/api/v1/grading-scales" in routes
        assert "/api/v1/grading-scales/{scale_id}" in routes


class TestCreateGradingScale:
    """Tests for POST /api/v1/grading-scales."""

    @pytest.mark.parametrize(
        "user_type",
        [UserType.SYSTEM_ADMIN, UserType.SYSTEM_MANAGER, UserType.CAMPUS_ADMIN],
    )
    def test_admins_create(self, client, auth_headers, mock_service, user_type):
        mock_service.create_scale = AsyncMock(return_value=make_grading_scale_response())

        response = client.post(
            "/api/v1/grading-scales",
            json={"name": "Percentage A-F"},
            headers=auth_headers(user_type),
        )

        assert response.status_code == 201
        assert [r["grade"] for r in response.json()["ranges"]] == ["A", "B", "C", "D", "F"]

    @pytest.mark.parametrize(
        "user_type",
        [UserType.CAMPUS_COORDINATOR, UserType.CAMPUS_TEACHER, UserType.CAMPUS_STUDENT],
    )
    def test_campus_staff_cannot_create(self, client, auth_headers, mock_service, user_type):
        response = client.post(
            "/api/v1/grading-scales",
            json={"name": "Percentage A-F"},
            headers=auth_headers(user_type),
        )

        assert response.status_code == 403

    def test_requires_authentication(self, client, mock_service):
        response = client.post("/api/v1/grading-scales", json={"name": "Percentage A-F"})

        assert response.status_code == 401

    def test_empty_ranges_rejected(self, client, auth_headers, mock_service):
        response = client.post(
            "/api/v1/grading-scales",
            json={"name": "Empty", "ranges": []},
            headers=auth_headers(),
        )

        assert response.status_code == 422

    def test_ranges_outside_bounds(self, client, auth_headers, mock_service):
        mock_service.create_scale = AsyncMock(
            side_effect=GradingScaleValidationError("Range A must fall within 0 to 50")
        )

        response = client.post(
            "/api/v1/grading-scales",
            json={"name": "Short", "max_score": 50},
            headers=auth_headers(),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Range A must fall within 0 to 50"


class TestReadGradingScales:
    """Tests for GET endpoints."""

    def test_any_user_lists(self, client, auth_headers, mock_service):
        mock_service.list_scales = AsyncMock(return_value=([make_grading_scale_response()], 11))

        response = client.get(
            "/api/v1/grading-scales",
            params={"status": "ACTIVE", "search": "percent", "page": 1, "page_size": 10},
            headers=auth_headers(UserType.CAMPUS_STUDENT),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 11
        assert body["has_more"] is True
        filters = mock_service.list_scales.call_args.args[0]
        assert filters.status == SystemStatus.ACTIVE
        assert filters.search == "percent"

    def test_page_size_limit(self, client, auth_headers, mock_service):
        response = client.get(
            "/api/v1/grading-scales",
            params={"page_size": 101},
            headers=auth_headers(),
        )

        assert response.status_code == 422

    def test_get_not_found(self, client, auth_headers, mock_service):
        mock_service.get_scale = AsyncMock(side_effect=GradingScaleNotFoundError("missing"))

        response = client.get(f"/api/v1/grading-scales/{uuid4()}", headers=auth_headers())

        assert response.status_code == 404
        assert response.json()["detail"] == "Grading scale not found"


class TestUpdateDeleteGradingScale:
    """Tests for PUT and DELETE."""

    def test_campus_admin_updates(self, client, auth_headers, mock_service):
        mock_service.update_scale = AsyncMock(
            return_value=make_grading_scale_response(name="Renamed")
        )

        response = client.put(
            f"/api/v1/grading-scales/{uuid4()}",
            json={"name": "Renamed"},
            headers=auth_headers(UserType.CAMPUS_ADMIN),
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"

    def test_update_invalid_ranges(self, client, auth_headers, mock_service):
        mock_service.update_scale = AsyncMock(
            side_effect=GradingScaleValidationError("Ranges A and B overlap")
        )

        response = client.put(
            f"/api/v1/grading-scales/{uuid4()}",
            json={"max_score": 80},
            headers=auth_headers(),
        )

        assert response.status_code == 400

    def test_manager_deletes(self, client, auth_headers, mock_service):
        mock_service.delete_scale = AsyncMock(return_value=None)

        response = client.delete(
            f"/api/v1/grading-scales/{uuid4()}",
            headers=auth_headers(UserType.SYSTEM_MANAGER),
        )

        assert response.status_code == 204

    def test_campus_admin_cannot_delete(self, client, auth_headers, mock_service):
        response = client.delete(
            f"/api/v1/grading-scales/{uuid4()}",
            headers=auth_headers(UserType.CAMPUS_ADMIN),
        )

        assert response.status_code == 403

    def test_delete_not_found(self, client, auth_headers, mock_service):
        mock_service.delete_scale = AsyncMock(side_effect=GradingScaleNotFoundError("missing"))

        response = client.delete(f"/api/v1/grading-scales/{uuid4()}", headers=auth_headers())

        assert response.status_code == 404
