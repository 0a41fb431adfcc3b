"""
Bookstore Backend — Request Logging Middleware
================================================

What:  One access log line per request: method, path, status, duration,
       request id, client IP.

Privacy:
    Request bodies are never logged. Registration and login bodies carry
    plaintext passwords.

Note on levels:
    User routes always answer HTTP 200 and carry the real outcome in the
    body, so a failed login still logs at INFO here. Service modules log the
    business outcome themselves.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("bookstore.access")

# Probes hit these every few seconds
QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration for each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
