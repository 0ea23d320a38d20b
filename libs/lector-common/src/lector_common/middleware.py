"""Common FastAPI middleware for lector services."""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from .logging import get_logger

log = get_logger(__name__)

# Headers the browser client sends on cross-origin calls
ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type", "x-request-id"]


def add_common_middleware(app: FastAPI, allowed_origins: list[str] | None = None) -> None:
    """Add CORS, request ID and access-log middleware to a FastAPI app."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=ALLOWED_HEADERS,
        expose_headers=["x-request-id"],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next) -> Response:
        """Generate or propagate a request ID and bind it to structlog context."""
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start = time.monotonic()

        try:
            response: Response = await call_next(request)
            response.headers["x-request-id"] = request_id
            log.info(
                "request_complete",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                elapsed_ms=int((time.monotonic() - start) * 1000),
            )
            return response
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
