"""
Logging setup for applications embedding railkit.

railkit modules log through structlog.get_logger(__name__) and never configure
logging themselves. An application that wants railkit's debug events rendered
calls configure_structlog() once at startup, typically with the level from
RailkitSettings.
"""

from __future__ import annotations

import logging

import structlog

from railkit.config import get_settings


def configure_structlog(log_level: str | None = None) -> None:
    """
    Configure structlog for structured, human-readable console output.

    Falls back to the configured RailkitSettings.log_level when no level is
    given, and to INFO when the level name is unknown.
    """
    level_name = (log_level or get_settings().log_level).upper()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
