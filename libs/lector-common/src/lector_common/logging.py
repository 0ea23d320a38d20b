"""structlog setup shared by lector services."""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(service_name: str, level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        service_name: Bound to every event as ``service``.
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        json_output: Render JSON lines instead of the console renderer.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level, force=True)

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
