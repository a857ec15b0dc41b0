"""
Middleware modules for the job card API.

- Correlation ID tracking for log lines and problem details
- Server-Timing headers and slow request logging
"""

from .correlation import CorrelationIdMiddleware, CorrelationLogFilter, correlation_id_ctx, request_id_ctx
from .timing import ServerTimingMiddleware

__all__ = [
    "CorrelationIdMiddleware",
    "CorrelationLogFilter",
    "correlation_id_ctx",
    "request_id_ctx",
    "ServerTimingMiddleware",
]
