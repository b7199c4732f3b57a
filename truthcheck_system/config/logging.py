"""Logging configuration using loguru with automatic dev/prod detection."""

import sys
from loguru import logger

from truthcheck_system.config.settings import settings


def configure_logging(level: str | None = None, log_format: str | None = None) -> None:
    """
    Configure loguru based on environment settings.

    Behavior:
    - Development (TTY + console format): Colorized, human-readable output
    - Production (non-TTY or json format): JSON-structured logs to stdout
    - Respects LOG_LEVEL from settings unless overridden

    Args:
        level: Optional level override (e.g. "DEBUG" from the CLI)
        log_format: Optional format override ("json" or "console")
    """
    logger.remove()

    level = level or settings.log_level
    log_format = (log_format or settings.log_format).lower()
    is_tty = sys.stderr.isatty()

    if is_tty and log_format == "console":
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[component]}</cyan> | <level>{message}</level>",
            level=level,
            colorize=True,
        )
    else:
        logger.add(
            sys.stdout,
            format="{message}",
            level=level,
            serialize=True,
            diagnose=False,
        )

    # Records logged without a bound component still render in console mode
    logger.configure(extra={"component": "truthcheck"})


def get_logger(component: str):
    """
    Get a logger instance bound to a specific component name.

    Args:
        component: Component/module name for log context

    Returns:
        Logger instance with component context

    Example:
        >>> log = get_logger("extraction.segmenter")
        >>> log.info("Splitting article")
    """
    return logger.bind(component=component)


configure_logging()

__all__ = ["logger", "get_logger", "configure_logging"]
