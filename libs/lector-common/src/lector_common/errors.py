"""Standard error response schema and exception handlers for lector services.

Every failure leaves the service as ``{"success": false, "error": "..."}``.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from .logging import get_logger

log = get_logger(__name__)


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


def error_response(message: str, status_code: int = 500) -> JSONResponse:
    """Create a standardized error JSON response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return error_response(exc.message, status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(_describe_validation(exc), status_code=400)


async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return error_response(str(exc.detail), status_code=exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("unhandled_error", path=request.url.path, error=str(exc), exc_info=exc)
    return error_response("Internal server error", status_code=500)


def install_error_handlers(app: FastAPI) -> None:
    """Register the standard error handlers on an app."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
