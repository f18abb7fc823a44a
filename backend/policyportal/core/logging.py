"""
Structured logging via structlog.

Call ``setup_logging`` once at startup; everywhere else use
``get_logger(__name__)`` and pass context as keyword arguments::

    logger = get_logger(__name__)
    logger.info("Family created", family_id=str(family.id))
"""

from __future__ import annotations

import logging
import sys

import structlog

from policyportal.core.config import settings


def setup_logging(level: str = "INFO") -> None:
    """Configure stdlib logging and structlog with a shared processor chain."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
        force=True,
    )

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.APP_ENV == "development"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a named structlog logger."""
    return structlog.get_logger(name)
