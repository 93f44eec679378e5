# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides health and readiness endpoints for the API.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from lxp import __version__

logger = logging.getLogger(__name__)

router = APIRouter()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")
    message: str | None = Field(None, description="Additional status message")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    checked_at: datetime = Field(description="When health was checked")
    database: ComponentHealth


class ReadinessResponse(BaseModel):
    """Readiness check response model."""
    ready: bool = Field(description="Whether the service is ready")
    checks: dict[str, Any] = Field(description="Individual check results")


async def check_database(request: Request) -> ComponentHealth:
    """Check the application's database connection."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        return ComponentHealth(status="unhealthy", message="Database not initialized")

    start = time.time()
    if not await database.check_connection():
        logger.error("Database health check failed")
        return ComponentHealth(status="unhealthy", message="Database unreachable")

    latency = (time.time() - start) * 1000
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Check if the API is healthy with database details."""
    settings = request.app.state.settings
    db_health = await check_database(request)

    return HealthResponse(
        status="healthy" if db_health.status == "healthy" else "degraded",
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - request.app.state.started_at),
        checked_at=datetime.now(timezone.utc),
        database=db_health,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Check if the API is ready to accept traffic."""
    db_health = await check_database(request)
    checks = {"database": {"status": db_health.status, "latency_ms": db_health.latency_ms}}

    return ReadinessResponse(ready=db_health.status == "healthy", checks=checks)
