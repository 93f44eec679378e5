# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Each application builds its own Limiter from settings in create_app() and
keeps it on app.state.limiter, where SlowAPIMiddleware finds it. Limits
are applied per client (user ID when authenticated, otherwise IP address).
"""

import logging

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from lxp.core.config.settings import RateLimitSettings

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 60


def get_client_identifier(request: Request) -> str:
    """Get a unique identifier for the client.

    Uses user ID if authenticated, otherwise uses IP address.

    Args:
        request: HTTP request.

    Returns:
        Client identifier string.
    """
    user = getattr(request.state, "user", None)
    if user:
        return f"user:{user.id}"
    return f"ip:{get_remote_address(request)}"


def build_limiter(settings: RateLimitSettings) -> Limiter:
    """Create a limiter with the configured default per-client limit.

    Args:
        settings: Rate limiting settings.

    Returns:
        A new Limiter with its own storage.
    """
    return Limiter(
        key_func=get_client_identifier,
        default_limits=[f"{settings.requests_per_minute}/minute"],
        storage_uri=settings.storage_uri,
    )


def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """Handle rate limit exceeded errors.

    Returns a 429 Too Many Requests response with retry information.
    Synchronous because SlowAPIMiddleware calls it without awaiting.

    Args:
        request: HTTP request.
        exc: Rate limit exceeded exception.

    Returns:
        JSON response with error details.
    """
    logger.warning(
        "Rate limit exceeded: %s for %s",
        exc.detail,
        get_client_identifier(request),
    )

    limit = getattr(exc, "limit", None)
    retry_after = (
        limit.limit.get_expiry() if limit is not None else DEFAULT_RETRY_AFTER_SECONDS
    )

    return Response(
        content='{"detail": "Too many requests. Please try again later."}',
        status_code=429,
        media_type="application/json",
        headers={
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": str(exc.detail),
        },
    )
