"""
Response timing middleware.

Adds ``Server-Timing`` and ``X-Response-Time`` headers and logs requests that
take longer than the slow-request threshold.
"""

import logging
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

SLOW_REQUEST_THRESHOLD_MS = 1000


class ServerTimingMiddleware(BaseHTTPMiddleware):
    """Measure wall-clock processing time for each HTTP request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time_ms = (time.perf_counter() - start_time) * 1000
        response.headers["Server-Timing"] = f"total;dur={process_time_ms:.1f};desc=\"Server Processing\""
        response.headers["X-Response-Time"] = f"{process_time_ms:.1f}ms"

        if process_time_ms >= SLOW_REQUEST_THRESHOLD_MS:
            logger.warning(
                "Slow request %s %s took %.0fms (status %d)",
                request.method,
                request.url.path,
                process_time_ms,
                response.status_code,
            )

        return response
