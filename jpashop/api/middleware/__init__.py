"""API middleware modules."""

from .security import (
    STATEMENT_COUNT_HEADER,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    StatementCountMiddleware,
    get_cors_origins,
)

__all__ = [
    "STATEMENT_COUNT_HEADER",
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "StatementCountMiddleware",
    "get_cors_origins",
]
