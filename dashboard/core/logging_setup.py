"""structlog configuration shared by the server and the scripts."""

from __future__ import annotations

import logging
from typing import Optional

import structlog

from dashboard.core.config import Settings


def resolve_level(name: str) -> int:
    """Map a level name such as ``"info"`` to its numeric ``logging`` level."""
    try:
        return logging.getLevelNamesMapping()[name.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level: {name!r}") from None


def configure_logging(settings: Settings, fmt: Optional[str] = None) -> None:
    """
    Configure structlog from settings.

    ``fmt`` overrides ``settings.log_format``; scripts pass ``"console"``.
    Standard-library loggers (uvicorn, SQLAlchemy) get the same threshold.
    """
    level = resolve_level(settings.log_level)
    fmt = fmt or settings.log_format

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if fmt == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
