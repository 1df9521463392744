"""Structured logging helpers for the jobchat service."""

import logging
from typing import Optional

from .config import configure_logging
from .context import current_request_id, get_log_context, log_context, new_request_id


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges its component field with per-call extra fields."""

    def process(self, msg, kwargs):
        # Per-call extra wins over the adapter's defaults
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str, component: Optional[str] = None):
    """Get a logger, optionally tagging every record with a component field.

    Example:
        >>> logger = get_logger(__name__, component="matching")
        >>> logger.info("Match completed", extra={"event": "match.completed"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger


__all__ = [
    "ComponentLoggerAdapter",
    "configure_logging",
    "current_request_id",
    "get_log_context",
    "get_logger",
    "log_context",
    "new_request_id",
]
