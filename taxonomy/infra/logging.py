"""Structured logging for the taxonomy library using structlog.

The library only ever asks structlog for loggers. Configuring output is left
to the consuming application; ``setup_logging`` is an opt-in helper for
applications (and scripts) that have no structlog setup of their own.
"""

import logging
from typing import Any, TextIO

import structlog
from structlog.types import Processor

from taxonomy.config import settings


def setup_logging(
    level: str | None = None,
    json_output: bool | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog output from settings.

    Args:
        level: Log level name (defaults to settings.log_level)
        json_output: Render JSON lines instead of console output (defaults
            to settings.log_json outside the dev environment)
        stream: Destination stream (defaults to stdout)
    """
    if level is None:
        level = settings.log_level
    if json_output is None:
        json_output = settings.log_json and settings.environment != "dev"

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream is None))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a logger, optionally bound to initial context.

    Args:
        name: Logger name (usually __name__)
        **initial_context: Key/value pairs bound to every event

    Returns:
        Bound structlog logger
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
