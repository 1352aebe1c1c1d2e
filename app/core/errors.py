"""
Application error taxonomy and its mapping onto HTTP responses.

Services raise these; the handlers registered by ``register_error_handlers``
turn them into ``{"error": ..., "field": ...}`` JSON bodies.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

log = structlog.get_logger()

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


class ApplicationError(Exception):
    """Base class for errors with a known HTTP status."""

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str = "Internal server error") -> None:
        self.message = message
        super().__init__(message)

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationError(ApplicationError):
    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        if self.field:
            body["field"] = self.field
        return body


class UnauthorizedError(ApplicationError):
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class ForbiddenError(ApplicationError):
    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class NotFoundError(ApplicationError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class ConflictError(ApplicationError):
    status_code = 409
    code = "CONFLICT"


def _first_validation_error(exc: RequestValidationError) -> tuple[str, Optional[str]]:
    """Reduce a request validation failure to (message, dotted field path)."""
    errors = exc.errors()
    if not errors:
        return "Invalid request data", None
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ())]
    if loc and loc[0] in _LOCATION_PREFIXES:
        loc = loc[1:]
    message = str(first.get("msg", "Invalid request data"))
    # pydantic prefixes messages raised from custom validators
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return message, ".".join(loc) or None


def register_error_handlers(app: FastAPI) -> None:
    """Install handlers mapping known errors to JSON bodies."""

    @app.exception_handler(ApplicationError)
    async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error("request.application_error", path=request.url.path, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message, field = _first_validation_error(exc)
        body: dict[str, Any] = {"error": message}
        if field:
            body["field"] = field
        return JSONResponse(status_code=400, content=body)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": detail},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        log.exception(
            "request.unhandled_error",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
