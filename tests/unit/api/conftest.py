# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for API tests.

The app is built from test settings and exercised through TestClient
without entering its lifespan, so no database is ever opened. get_db is
overridden with the shared mock session and services are patched per test.
"""

from typing import Callable
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from lxp.api.app import create_app
from lxp.api.dependencies import get_db
from lxp.core.config import Settings
from lxp.core.enums import UserType
from lxp.domains.auth.jwt import JWTManager


@pytest.fixture
def app(test_settings: Settings, mock_db) -> FastAPI:
    """Create the application with the database dependency overridden."""
    app = create_app(test_settings)
    app.dependency_overrides[get_db] = lambda: mock_db
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def auth_headers(test_settings: Settings) -> Callable[..., dict[str, str]]:
    """Build Authorization headers carrying a real token for a user type."""
    jwt_manager = JWTManager(test_settings.jwt)

    def _headers(
        user_type: UserType | None = UserType.SYSTEM_ADMIN,
        user_id: str | None = None,
    ) -> dict[str, str]:
        token = jwt_manager.create_access_token(user_id or str(uuid4()), user_type=user_type)
        return {"Authorization": f"Bearer {token}"}

    return _headers
