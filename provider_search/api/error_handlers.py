# This file maps exceptions to the API's JSON error body.
# Bad query parameters become a 400 listing each offending field, in the same shape the
# search normalizer produces. Anything unexpected is logged and answered with a generic 500.

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

LOGGER = logging.getLogger("api")

_PARAMETER_SOURCES = {"query", "path", "header", "body"}


class APIError(Exception):
    """Error raised by routes with a status, a machine code, and optional details."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details


def error_response(
    request: Request,
    *,
    status_code: int,
    error_code: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    body = {
        "error_code": error_code,
        "message": message,
        "details": details,
        "request_id": str(getattr(request.state, "request_id", "unknown")),
        "timestamp": datetime.now(tz=UTC).isoformat(),
    }
    return JSONResponse(status_code=status_code, content=body)


def _field_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    fields: list[dict[str, Any]] = []
    for error in exc.errors():
        path = [str(part) for part in error.get("loc", ()) if part not in _PARAMETER_SOURCES]
        fields.append(
            {
                "field": ".".join(path) or "request",
                "message": str(error.get("msg", "Invalid value")),
                "value": error.get("input"),
            }
        )
    return fields


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
        return error_response(
            request,
            status_code=exc.status_code,
            error_code=exc.error_code,
            message=exc.message,
            details=exc.details,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(
            request,
            status_code=400,
            error_code="VALIDATION_ERROR",
            message="Invalid request parameters.",
            details=_field_errors(exc),
        )

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        return error_response(
            request,
            status_code=exc.status_code,
            error_code="HTTP_ERROR",
            message=str(exc.detail),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.error(
            "Unhandled error request_id=%s path=%s",
            getattr(request.state, "request_id", "unknown"),
            request.url.path,
            exc_info=exc,
        )
        return error_response(
            request,
            status_code=500,
            error_code="INTERNAL_SERVER_ERROR",
            message="Internal server error",
        )
