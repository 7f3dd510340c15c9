"""Structlog configuration for fcswipe."""

import logging
import sys
from typing import TextIO

import structlog

from fcswipe.config import SwipeConfig, LogFormat


def _renderers(log_format: LogFormat, stream: TextIO) -> list:
    """Final processors for the chosen output format."""
    if log_format == LogFormat.JSON:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    isatty = getattr(stream, "isatty", None)
    return [
        structlog.dev.set_exc_info,
        structlog.dev.ConsoleRenderer(colors=bool(isatty and isatty())),
    ]


def configure_logging(
    config: SwipeConfig | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structlog for a session.

    Events go to ``stream``, or to whatever ``sys.stderr`` is at call time,
    so the terminal screen on stdout stays clean. Loggers bound before this
    call keep the previous stream; bind them again afterwards.

    Args:
        config: SwipeConfig instance, uses defaults if None
        stream: Text stream for log lines
    """
    if config is None:
        config = SwipeConfig()
    if stream is None:
        stream = sys.stderr

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        *_renderers(config.log_format, stream),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """
    Get a structlog logger, optionally bound to a component name.

    Args:
        name: Optional logger name for context

    Returns:
        Configured structlog BoundLogger
    """
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
