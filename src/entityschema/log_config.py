"""structlog configuration for applications embedding entityschema."""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog to render events to stderr.

    Args:
        level: Minimum level to emit, e.g. "DEBUG" or "INFO".
        json_output: Render JSON lines instead of the console format.

    Raises:
        ValueError: If ``level`` is not a known logging level.
    """
    numeric_level = logging.getLevelNamesMapping().get(level.upper())
    if numeric_level is None:
        raise ValueError(f"Unknown log level: {level}")

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=lambda *args: structlog.PrintLogger(file=sys.stderr),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        cache_logger_on_first_use=True,
    )
