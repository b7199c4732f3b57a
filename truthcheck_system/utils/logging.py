"""Structured logging utilities using structlog for scoring and search components."""

import os
import sys
import uuid
from typing import Any, Optional

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import JSONRenderer

IS_TTY = sys.stderr.isatty()
LOG_FORMAT = os.getenv("LOG_FORMAT", "console").lower()
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_structured_logging() -> None:
    """
    Configure structured logging with appropriate processors and renderers.

    Uses:
    - Console renderer for development (colorized, human-readable)
    - JSON renderer for production (structured, machine-readable)
    - Context variables so a run_id bound by the pipeline reaches every event
    """
    processors = [
        merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if IS_TTY and LOG_FORMAT == "console":
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    else:
        processors.append(JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_structured_logger(
    name: str,
    **additional_context: Any,
) -> structlog.BoundLogger:
    """
    Get a structured logger with bound context.

    Args:
        name: Logger name (typically the component name)
        **additional_context: Additional context to bind

    Returns:
        Configured BoundLogger instance with context

    Example:
        >>> logger = get_structured_logger("scoring.web", claim_id=3)
        >>> logger.info("search_complete", results=12)
    """
    logger = structlog.get_logger(name).bind(component=name)
    if additional_context:
        logger = logger.bind(**additional_context)
    return logger


def new_run_id() -> str:
    """Generate a correlation ID for one pipeline run."""
    return str(uuid.uuid4())


def bind_run_context(run_id: str, source_url: Optional[str] = None) -> None:
    """
    Bind run-scoped context into structlog's context variables.

    Every structlog event emitted afterwards in the same task tree carries
    ``run_id`` (and ``source_url`` when known).
    """
    context: dict[str, Any] = {"run_id": run_id}
    if source_url:
        context["source_url"] = source_url
    structlog.contextvars.bind_contextvars(**context)


def clear_run_context() -> None:
    """Drop run-scoped context variables."""
    structlog.contextvars.clear_contextvars()


configure_structured_logging()


__all__ = [
    "get_structured_logger",
    "new_run_id",
    "bind_run_context",
    "clear_run_context",
    "configure_structured_logging",
]
