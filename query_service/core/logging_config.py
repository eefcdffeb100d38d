"""
Centralized logging configuration with request_id context support using loguru.

This module configures loguru to intercept all standard logging calls and provides
automatic request_id propagation using contextvars.
"""

import json
import logging
import sys
import traceback
from contextvars import ContextVar
from types import FrameType
from typing import Optional

from loguru import logger

from query_service.core.config import settings

# Async-safe context variable holding the id of the request being served
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class InterceptHandler(logging.Handler):
    """
    Handler that intercepts standard logging calls and redirects them to loguru.

    Modules keep using logging.getLogger(__name__); records end up in loguru sinks.
    """

    def emit(self, record: logging.LogRecord):
        """Intercept standard logging record and pass to loguru."""
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where the logging call originated
        frame: Optional[FrameType] = sys._getframe(settings.LOGGING_FRAME_DEPTH)
        depth: int = settings.LOGGING_FRAME_DEPTH

        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def context_filter(record):
    """Add request_id from contextvars to loguru records."""
    request_id = request_id_var.get()
    if request_id and request_id != "-":
        record["extra"]["request_id"] = request_id

    return record


def build_json_record(record) -> dict:
    """
    Build a compact JSON log record from a loguru record.

    Fields: timestamp, level, logger, message, request_id (if present),
    exception (if present).
    """
    log_record = {
        "timestamp": record["time"].strftime("%Y-%m-%d %H:%M:%S"),
        "level": record["level"].name,
        "logger": record["name"],
        "message": record["message"],
    }

    if "request_id" in record["extra"]:
        log_record["request_id"] = record["extra"]["request_id"]

    if record["exception"]:
        exc = record["exception"]
        traceback_text = None
        if exc.traceback:
            traceback_text = "".join(
                traceback.format_exception(exc.type, exc.value, exc.traceback)
            ).strip()

        log_record["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
            "traceback": traceback_text,
        }
    else:
        log_record["exception"] = None

    return log_record


def json_sink(message):
    """Write each record to stderr as one JSON line."""
    sys.stderr.write(json.dumps(build_json_record(message.record)) + "\n")


def configure_logging():
    """
    Configure logging for the application using loguru.

    Removes the default loguru handler, installs the JSON sink with the
    request_id filter, and routes all standard logging through loguru.
    """
    logger.remove()

    logger.add(
        json_sink,
        level=settings.LOG_LEVEL,
        backtrace=True,
        diagnose=False,
        filter=context_filter,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # Quiet chatty libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logger.info("Logging configured successfully with loguru")


def set_request_id(request_id: str):
    """Set the request_id for the current context."""
    request_id_var.set(request_id)


def clear_request_id():
    """Clear the request_id from the current context."""
    request_id_var.set("-")


def get_request_id() -> str:
    """Get the current request_id from context."""
    return request_id_var.get()
