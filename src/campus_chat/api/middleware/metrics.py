"""Access log with request latency."""
from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("campus_chat.access")

# Probes hit these every few seconds
_QUIET_PATHS = frozenset({"/healthz", "/readyz"})


class RequestTimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            if request.url.path not in _QUIET_PATHS:
                logger.info(
                    "%s %s -> %d in %.1fms",
                    request.method,
                    request.url.path,
                    status_code,
                    (time.perf_counter() - started) * 1000,
                )
