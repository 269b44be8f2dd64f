"""Per-request access log line with a propagated X-Request-ID."""

from __future__ import annotations

import logging
import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("app.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            logger.info(
                "request_complete request_id=%s method=%s path=%s status_code=%s duration_ms=%.2f user_id=%s",
                request_id,
                request.method,
                request.url.path,
                status_code,
                (time.perf_counter() - started) * 1000.0,
                getattr(request.state, "user_id", None),
            )
        response.headers["X-Request-ID"] = request_id
        return response
