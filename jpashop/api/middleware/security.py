"""
HTTP Middleware

Provides:
- Security headers (nosniff, frame denial, referrer policy)
- Request ID tracking
- Per-request SQL statement counting and request metrics
"""

import secrets
import time
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from jpashop.config import get_settings
from jpashop.db.instrumentation import count_statements
from jpashop.kernel.http.errors import unhandled_error_response
from jpashop.monitoring.metrics import get_metrics

logger = structlog.get_logger()

STATEMENT_COUNT_HEADER = "X-DB-Statement-Count"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    Headers:
    - X-Content-Type-Options: nosniff
    - X-Frame-Options: DENY
    - Referrer-Policy: strict-origin-when-cross-origin
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Add unique request ID to all requests for tracing.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or secrets.token_hex(8)

        # Add to request state for logging
        request.state.request_id = request_id

        # Bind to structlog context
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers["X-Request-ID"] = request_id
        return response


class StatementCountMiddleware(BaseHTTPMiddleware):
    """
    Count the SQL statements each request issues.

    The count is returned in the `X-DB-Statement-Count` header, logged, and
    observed in Prometheus together with request latency. Unhandled errors
    are turned into the generic 500 here, so failed requests are counted
    and pass back through the outer middleware like any other response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        with count_statements() as counter:
            try:
                response = await call_next(request)
            except Exception as exc:
                response = unhandled_error_response(request, exc)
        duration = time.perf_counter() - start

        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)

        metrics = get_metrics()
        metrics.track_http_request(request.method, endpoint, response.status_code, duration)
        metrics.track_db_statements(endpoint, counter.count)

        response.headers[STATEMENT_COUNT_HEADER] = str(counter.count)
        logger.info(
            "Request served",
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
            db_statements=counter.count,
            duration_ms=round(duration * 1000, 2),
        )
        return response


def get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    Production: only configured origins
    Development: configured origins plus common local ports
    """
    settings = get_settings()

    if settings.environment == "production":
        return settings.cors_origins

    dev_origins = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]
    return list(dict.fromkeys([*settings.cors_origins, *dev_origins]))
