# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request logging middleware.

Binds a request id and path to the logging context, logs the duration of
every request, and warns about requests slower than the configured
threshold.
"""

import logging
import time
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from lxp.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware logging request durations.

    Attributes:
        _slow_request_ms: Requests taking longer are logged at WARNING.
    """

    def __init__(self, app: ASGIApp, slow_request_ms: int = 500) -> None:
        super().__init__(app)
        self._slow_request_ms = slow_request_ms

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        bind_context(request_id=request_id, path=request.url.path)
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Error in %s %s after %.0fms",
                request.method,
                request.url.path,
                (time.perf_counter() - start) * 1000,
            )
            clear_context()
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        if elapsed_ms > self._slow_request_ms:
            logger.warning(
                "Slow request: %s %s took %.0fms",
                request.method,
                request.url.path,
                elapsed_ms,
            )
        else:
            logger.debug(
                "%s %s took %.0fms (%d)",
                request.method,
                request.url.path,
                elapsed_ms,
                response.status_code,
            )
        clear_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response