"""
Logging setup.

Configures stdlib logging from LoggingConfig and routes structlog through it,
so `structlog.get_logger()` calls share the same handlers and level.
"""

import logging

import structlog

from src.core.config.logging_config import LoggingConfig


def configure_logging(logging_config: LoggingConfig) -> None:
    """Configure stdlib logging and structlog for the service."""
    level = getattr(logging, logging_config.level.upper(), logging.INFO)

    logging.basicConfig(level=level, format=logging_config.format)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
