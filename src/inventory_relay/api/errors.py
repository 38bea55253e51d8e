# src/inventory_relay/api/errors.py
"""Map service errors to ``{"error": message}`` JSON responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from inventory_relay.core.errors import RateLimitError, ServiceError
from inventory_relay.db.store import StoreError
from inventory_relay.db.time import to_iso

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
    **extra: str,
) -> JSONResponse:
    """Build the single error shape returned by every endpoint."""
    return JSONResponse(
        status_code=status_code,
        content={"error": message, **extra},
        headers=headers,
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    fields = []
    for error in exc.errors():
        if error.get("type") == "json_invalid":
            return "Invalid JSON body"
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        if location:
            fields.append(".".join(location))
    if not fields:
        return "Invalid request body"
    return "Missing or invalid fields: " + ", ".join(dict.fromkeys(fields))


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the FastAPI app."""

    @app.exception_handler(RateLimitError)
    async def rate_limit_handler(request: Request, exc: RateLimitError) -> JSONResponse:
        reset_at = to_iso(exc.reset_at)
        return error_response(
            exc.status_code,
            exc.message,
            headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": reset_at},
            resetAt=reset_at,
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s on %s %s", exc.message, request.method, request.url.path)
            return error_response(exc.status_code, INTERNAL_ERROR_MESSAGE)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error(
            "Store failure on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled %s on %s %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
