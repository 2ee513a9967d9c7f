"""
Class Service — Request Context Middleware
===========================================

What:  Assigns a correlation ID to every request and writes one access log
       line per request.
How:   The ID comes from the X-Request-ID header when the caller sends one,
       otherwise a short UUID is generated. It is stored in a ContextVar (for
       loggers and other middleware), in request.state (for handlers) and
       echoed in the response header.
When:  Directly inside CORS and outside the auth gateway, so requests
       rejected by the gateway are still logged with their ID.

Access line:
    GET /api/v1/classes 200 4.2ms [a1b2c3d4] from 10.0.0.7
    level: ERROR for 5xx, WARNING for 4xx, INFO otherwise.
    Health probes are not logged.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

access_logger = logging.getLogger("class_service.access")

_UNLOGGED_PATHS = {"/health", "/api/v1/health"}


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid

        path = request.url.path
        if path in _UNLOGGED_PATHS:
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        client_ip = request.client.host if request.client else "unknown"
        access_logger.log(
            level,
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
