"""Logging configuration using structlog.

The library only emits log events through unbound structlog loggers and
never configures logging itself. Applications opt in to rendering those
events by calling configure_logging, at any time: loggers are assembled
on every bind, so a later call takes effect for every module.
"""

import logging
import sys
from typing import TextIO

import structlog
from structlog._config import BoundLoggerLazyProxy
from structlog.typing import FilteringBoundLogger


def configure_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging for easyhttp events.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        json_format: If True, output JSON format (for production).
        stream: Where rendered events are written. Defaults to the
            current sys.stdout.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream or sys.stdout),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Get a lazily configured logger.

    Args:
        name: Optional logger name, added to every event as "logger".

    Returns:
        structlog logger proxy; configuration is resolved when it logs.
    """
    if name:
        return BoundLoggerLazyProxy(None, initial_values={"logger": name})
    return structlog.get_logger()
