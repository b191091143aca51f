"""
FormDrop Backend: Request Logging Middleware
==============================================

What:  One access log line for every HTTP request.
How:   Times the request and logs method, path, status, duration, request ID
       and client IP once the response is ready.
When:  Inside RequestIDMiddleware (uses its request ID for correlation).

What we log vs what we DON'T log (privacy):
    Log:       method, path, status, duration, IP, request ID
    Don't log: form fields (names, emails, messages are PII), file contents
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("formdrop.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Level follows the status class: 5xx → ERROR, 4xx → WARNING, else INFO.

    Typical durations:
        - GET /collectionData: 5-50ms (single SELECT)
        - POST /addUser: 1-5s (SMTP relay dominates)
    """

    # Probed every few seconds by monitors
    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
