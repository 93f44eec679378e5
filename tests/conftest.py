# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests against mocked database sessions
- API tests against the FastAPI app with dependency overrides
"""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from lxp.core.config import Settings
from lxp.core.enums import AcademicCycleType, SystemStatus, TermPeriod, TermType


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Provide settings for tests, independent of the environment."""
    return Settings(
        environment="test",
        debug=False,
        log_level="DEBUG",
        jwt={"secret_key": "test-secret-key-for-testing-only"},
        rate_limit={"requests_per_minute": 1000},
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    return db



# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def sample_cycle():
    """Create a sample academic cycle model."""
    cycle = MagicMock()
    cycle.id = str(uuid4())
    cycle.code = "AY-2024"
    cycle.name = "Academic Year 2024-2025"
    cycle.description = None
    cycle.type = AcademicCycleType.ANNUAL
    cycle.start_date = date(2024, 9, 1)
    cycle.end_date = date(2025, 6, 30)
    cycle.status = SystemStatus.ACTIVE
    cycle.created_by = "admin-1"
    cycle.updated_by = "admin-1"
    cycle.deleted_at = None
    cycle.created_at = datetime.now(timezone.utc)
    return cycle


@pytest.fixture
def sample_term(sample_cycle):
    """Create a sample term model inside sample_cycle."""
    term = MagicMock()
    term.id = str(uuid4())
    term.code = "FALL-2024"
    term.name = "Fall 2024"
    term.description = None
    term.term_type = TermType.SEMESTER
    term.term_period = TermPeriod.FALL
    term.start_date = date(2024, 9, 1)
    term.end_date = date(2025, 1, 31)
    term.course_id = str(uuid4())
    term.academic_cycle_id = sample_cycle.id
    term.status = SystemStatus.ACTIVE
    term.created_at = datetime.now(timezone.utc)
    return term
