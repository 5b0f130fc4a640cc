"""Structured logging for planquota built on structlog."""
from __future__ import annotations

import logging
from typing import Literal

import structlog

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

LOG_LEVELS: dict[str, int] = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def resolve_level(level: int | str) -> int:
    """Map a level name or number onto a stdlib logging level."""
    if isinstance(level, int):
        return level
    try:
        return LOG_LEVELS[level.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}") from None


def setup_logging(level: int | str = logging.INFO, json: bool = True) -> None:
    """Configure structlog once per process.

    Context bound with ``structlog.contextvars`` (request ids, user ids) is
    merged into every event.
    """
    numeric = resolve_level(level)
    logging.basicConfig(level=numeric, format="%(message)s")
    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


__all__ = ["LOG_LEVELS", "LogLevel", "get_logger", "resolve_level", "setup_logging"]
