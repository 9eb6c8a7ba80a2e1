"""
Structured logging setup using structlog.

Provides consistent logging with trace IDs for request flow tracking.
"""

import logging
import sys
from typing import Any

import structlog

from .settings import settings


def configure_logging() -> None:
    """
    Configure structured logging with trace IDs.

    Uses the colored console renderer when running at DEBUG level and JSON
    output otherwise.
    """
    processors = [
        structlog.contextvars.merge_contextvars,  # trace_id and other bound context
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.dashboard_api_log_level == "DEBUG":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.dashboard_api_log_level),
    )


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """
    Bind additional context variables to logging.

    Args:
        **kwargs: Context variables to bind (e.g., collection, refresh_id)
    """
    structlog.contextvars.bind_contextvars(**kwargs)

