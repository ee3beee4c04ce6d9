"""
Loguru configuration for the courier service.

This module configures loguru with:
- Automatic Trace ID in each log
- JSON logs by default, human readable logs when console_log is set
- Redirection of standard library logs to loguru
"""

import logging
import sys
from typing import Any

from loguru import logger

from courier.config import settings
from courier.core.trace_context import trace_id_context
from courier.core.uvicorn_filters import ProbeFilter


def add_trace_id(record: dict[str, Any]) -> bool:
    """
    Adds the trace_id to the log record.

    Args:
        record: Loguru record

    Returns:
        True to indicate that the filter passed
    """
    trace_id = trace_id_context.get()
    record["extra"]["trace_id"] = trace_id if trace_id else "N/A"
    return True


def configure_logger(console: bool | None = None, level: str | None = None) -> None:
    """
    Configures loguru with application settings.

    Args:
        console: Human readable output instead of JSON (defaults to settings)
        level: Minimum log level (defaults to settings)
    """
    if console is None:
        console = settings.console_log

    logger.remove()
    logger.add(
        sink=sys.stderr,
        level=(level or settings.log_level).upper(),
        format=settings.log_format,
        filter=add_trace_id,
        colorize=console,
        serialize=not console,
        backtrace=True,
        diagnose=False,
        enqueue=settings.logger_enqueue,
    )


configure_logger()


__all__ = ["logger", "InterceptHandler", "configure_logger", "intercept_standard_logging"]


class InterceptHandler(logging.Handler):
    """
    Handler to redirect standard logging logs to loguru.

    Captures logs from libraries that use standard logging (uvicorn, httpx,
    google-cloud) and processes them with loguru.
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

    Probe requests are filtered out of the uvicorn access log.
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

    logging.getLogger("uvicorn.access").addFilter(ProbeFilter())
