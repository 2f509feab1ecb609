"""
Structured logging for the booking engine.

Every event is a snake_case name plus key/value context, e.g.
``logger.info("reservation_created", reservation_id=..., listing_id=...)``.
Request-scoped values bound by RequestIDMiddleware are merged in from
structlog's contextvars.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, MutableMapping, cast

import structlog

from venue_booking.config import LOG_LEVEL

Processor = Callable[[Any, str, MutableMapping[str, Any]], Any]

QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "uvicorn.access")


def build_processors(level: str) -> list[Processor]:
    """
    Processor chain for the given log level.

    DEBUG renders coloured console lines with pretty tracebacks. Every other
    level renders one JSON object per line with the traceback as a string.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if level == "DEBUG":
        processors += [
            structlog.dev.set_exc_info,
            cast(Processor, structlog.dev.ConsoleRenderer(colors=True)),
        ]
    else:
        processors += [
            structlog.processors.format_exc_info,
            cast(Processor, structlog.processors.JSONRenderer()),
        ]
    return processors


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure stdlib logging and structlog for the whole process."""
    logging.basicConfig(
        format="[%(asctime)s] %(levelname)s in %(name)s: %(message)s",
        stream=sys.stdout,
        level=level,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(level),
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
