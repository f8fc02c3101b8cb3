import logging
import os

import structlog
from dotenv import load_dotenv

load_dotenv()

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def level_from_env(default: int = logging.INFO) -> int:
    """Resolve the LOG_LEVEL environment variable to a logging level."""
    return LOG_LEVELS.get(os.getenv("LOG_LEVEL", "").upper(), default)


def setup_logging(level: int | None = logging.INFO) -> None:
    """
    Configure structured logging for the monitor and the feed generator.

    Args:
        level: The logging level to use. Defaults to INFO.
    """
    logging.basicConfig(level=level)
    logging.getLogger().setLevel(level)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
            pad_event=40,
        ),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


setup_logging(level=level_from_env(default=logging.DEBUG))
