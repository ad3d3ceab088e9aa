"""structlog setup for ThaiSave.

Library modules only call ``structlog.get_logger()``; entry points call
:func:`configure_logging` once to choose the level and renderer.
"""

import logging
import sys

import structlog

from .exceptions import ConfigurationError


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog with a level filter and a console or JSON renderer.

    Args:
        level: Standard logging level name (DEBUG, INFO, ...)
        json_logs: Render JSON lines instead of the console renderer

    Raises:
        ConfigurationError: If ``level`` is not a standard level name.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ConfigurationError(
            f"Invalid log level: {level}",
            config_key="log_level",
            expected="DEBUG, INFO, WARNING, ERROR or CRITICAL",
            actual=level,
        )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
