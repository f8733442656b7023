"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog


def setup_logging(level: str = "info", stream: TextIO | None = None) -> None:
    """Configure structlog for JSON output, one object per line.

    Lambda forwards each stderr line to CloudWatch Logs as one record, so
    tracebacks are folded into the ``exception`` key instead of spanning lines.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=True,
    )


def bind_invocation(context: Any) -> None:
    """Reset the per-invocation log context and tag it with the Lambda request.

    A warm execution environment reuses the process, so keys bound by the
    previous invocation are dropped first.
    """
    structlog.contextvars.clear_contextvars()
    if context is None:
        return
    structlog.contextvars.bind_contextvars(
        request_id=getattr(context, "aws_request_id", ""),
        function_name=getattr(context, "function_name", ""),
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]
