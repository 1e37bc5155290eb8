"""
Loguru configuration for pkceflow.

This module configures loguru with:
- Configurable level and format from settings
- Redirection of standard library logs to loguru
- Support for colorization in development
"""

import logging
import sys

from loguru import logger

from pkceflow.config import get_settings


def configure_logger() -> None:
    """
    Configures loguru with application settings.

    This function:
    1. Removes default loguru handlers
    2. Adds handler to stderr with custom configuration
    3. Configures level, format, colorization, etc.
    """
    settings = get_settings()

    # Remove default configuration
    logger.remove()

    logger.add(
        sink=sys.stderr,
        level=settings.log_level.upper(),
        format=settings.log_format,
        colorize=True,
        serialize=False,
        backtrace=True,
        diagnose=settings.debug,
        enqueue=settings.logger_enqueue,
    )


# Configure logger when importing the module
configure_logger()


__all__ = ["logger", "InterceptHandler", "intercept_standard_logging"]


class InterceptHandler(logging.Handler):
    """
    Handler to redirect standard logging logs to loguru.

    This allows capturing logs from libraries that use standard logging
    (like uvicorn, httpx) and process them with loguru.

    Usage:
        import logging
        from pkceflow.core.logging import InterceptHandler

        logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO)
    """

    def emit(self, record: logging.LogRecord) -> None:
        """
        Redirects a standard logging record to loguru.

        Args:
            record: logging.LogRecord record
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def intercept_standard_logging() -> None:
    """
    Configures redirection of standard logging to loguru.

    Intercepts logs from uvicorn, httpx and fastapi.
    Call this function in main.py when initializing the app.
    """
    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO)

    for logger_name in [
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "httpx",
        "fastapi",
    ]:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False
