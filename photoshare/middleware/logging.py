"""
PhotoShare Backend - Request Logging Middleware
=================================================

What:  One access-log line per request: method, path, status, duration,
       request ID, language and client IP.
How:   Level follows the status class (5xx ERROR, 4xx WARNING, else INFO);
       /health is skipped. Bodies and Authorization headers are never
       logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from photoshare.i18n import language_var
from photoshare.middleware.request_id import request_id_var

logger = logging.getLogger("photoshare.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

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
            "%s %s %d %.1fms [%s] lang=%s from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            language_var.get(),
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
