# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the LXP academic
core API. Everything with a lifecycle (database, rate limiter) belongs to
the application instance created here.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from lxp import __version__
from lxp.api.middleware.auth import AuthMiddleware
from lxp.api.middleware.rate_limit import build_limiter, rate_limit_exceeded_handler
from lxp.api.middleware.request_logging import RequestLoggingMiddleware
from lxp.api.routes import health
from lxp.api.v1 import router as v1_router
from lxp.core.config import Settings, get_settings
from lxp.domains.auth.jwt import JWTManager
from lxp.infrastructure.database import Database, DatabaseError
from lxp.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the database connection pool at startup. At shutdown it disposes
    the pool and resets the rate limiter storage.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    setup_logging(settings)
    logger.info(
        "Starting LXP academic core API (environment=%s, debug=%s)",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    database = Database(settings.database)
    try:
        await database.connect()
        logger.info("Database connection initialized")
    except DatabaseError as e:
        logger.warning("Failed to initialize database connection: %s", str(e))
    app.state.database = database

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    await database.dispose()
    logger.info("Database connection closed")

    app.state.limiter.reset()

    logger.info("Shutting down LXP academic core API")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to build the application from. Defaults to the
            cached environment settings.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="LXP Academic Core API",
        description="Academic cycles, terms and grade books",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        # Disable automatic redirects from /path to /path/
        # This prevents 307 redirects that lose Authorization headers
        redirect_slashes=False,
    )

    # =========================================================================
    # State
    # =========================================================================
    app.state.settings = settings
    app.state.started_at = time.time()
    app.state.limiter = build_limiter(settings.rate_limit)

    # =========================================================================
    # Exception handlers
    # =========================================================================
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================

    # Rate limiting runs after auth so limits are keyed by user
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(AuthMiddleware, jwt_manager=JWTManager(settings.jwt))

    app.add_middleware(
        RequestLoggingMiddleware,
        slow_request_ms=settings.api.slow_request_ms,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
