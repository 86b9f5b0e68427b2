from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import MissingGreenlet
from sqlalchemy.orm.exc import DetachedInstanceError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from jpashop.kernel.errors import ShopError

logger = structlog.get_logger()

# Lazy loads attempted without a usable session.
_LAZY_LOAD_ERRORS = (DetachedInstanceError, MissingGreenlet)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _error_response(
    request: Request,
    status_code: int,
    *,
    code: str,
    detail: Any,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    payload: dict[str, Any] = {"detail": detail, "code": code}
    request_id = _request_id(request)
    if request_id:
        payload["request_id"] = request_id
    return JSONResponse(status_code=status_code, content=payload, headers=headers)


def unhandled_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log `exc` and build the generic 500 body."""
    log_fields = {
        "request_id": _request_id(request),
        "path": request.url.path,
        "error_type": type(exc).__name__,
        "error": str(exc),
    }
    if isinstance(exc, _LAZY_LOAD_ERRORS):
        logger.error("Lazy load without an open unit of work", **log_fields)
    else:
        logger.exception("Unhandled exception", **log_fields)

    return _error_response(request, 500, code="internal.unhandled", detail="Internal Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the shop's error payloads on `app`.

    Every error body is `{"detail", "code"}` plus `request_id` when the
    request carries one. Domain errors keep their status; anything else,
    including lazy loads on a closed session, is a generic 500.
    """

    @app.exception_handler(ShopError)
    async def _shop_error(request: Request, exc: ShopError) -> Response:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_public_dict(request_id=_request_id(request)),
        )

    @app.exception_handler(HTTPException)
    async def _http_exception(request: Request, exc: HTTPException) -> Response:
        return _error_response(
            request,
            int(exc.status_code),
            code=f"http.{exc.status_code}",
            detail=exc.detail,
            headers=dict(exc.headers or {}),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> Response:
        return _error_response(request, 422, code="http.validation_error", detail=exc.errors())

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> Response:
        return unhandled_error_response(request, exc)
