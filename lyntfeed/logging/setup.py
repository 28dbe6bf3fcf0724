"""Structlog configuration for lyntfeed."""

import logging
import sys

import structlog

from lyntfeed.config import FeedConfig, LogFormat


# Libraries that log every statement or connection at DEBUG
QUIET_LOGGERS = ("aiosqlite", "PIL", "multipart", "azure")


def configure_logging(config: FeedConfig | None = None) -> None:
    """
    Configure structlog for the feed service.

    Request-scoped fields bound with bind_request_context() or
    bind_log_context() are merged into every event, so service and
    store code only log what is local to them.

    Args:
        config: FeedConfig instance, uses defaults if None
    """
    if config is None:
        config = FeedConfig()

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if config.log_format == LogFormat.JSON:
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.extend([
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(**fields) -> None:
    """
    Start a fresh log context for one request.

    Clears whatever the previous request on this task left behind.

    Example:
        bind_request_context(request_id="ab12", method="GET", path="/api/lynt")
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**fields)


def bind_log_context(**fields) -> None:
    """Add fields to the current request's log context."""
    structlog.contextvars.bind_contextvars(**fields)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """
    Get a configured structlog logger.

    Args:
        name: Optional logger name for context

    Returns:
        Configured structlog BoundLogger
    """
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
