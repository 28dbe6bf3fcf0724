"""Logging helpers."""

from lyntfeed.logging.setup import (
    bind_log_context,
    bind_request_context,
    configure_logging,
    get_logger,
)

__all__ = ["configure_logging", "get_logger", "bind_request_context", "bind_log_context"]
