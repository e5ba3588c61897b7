"""
Correlation ID Middleware

Every request gets a correlation id (taken from X-Correlation-ID or
generated) that is attached to each log line written while handling it and
echoed back in the response headers. Uploads, validations and leaderboard
queries can then be traced end to end.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.logging import get_logger, set_correlation_id

log = get_logger("http")


class CorrelationMiddleware(BaseHTTPMiddleware):
    HEADER_NAME = "X-Correlation-ID"

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(self.HEADER_NAME) or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)

        started = time.perf_counter()
        response = await call_next(request)
        response.headers[self.HEADER_NAME] = correlation_id

        log.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response
