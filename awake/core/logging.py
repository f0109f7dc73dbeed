"""Logging configuration."""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from awake.core.config import Settings

# LogRecord attributes that are never copied into structured output
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "request_id",
    }
)

_NOISY_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


class RequestIDFilter(logging.Filter):
    """Filter to inject request ID into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        # Import here to avoid circular dependency
        from awake.api.middleware.request_id import get_request_id

        if not hasattr(record, "request_id"):
            record.request_id = get_request_id() or None

        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per log line, including any `extra` fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None)
        if request_id:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(
            (key, value) for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS
        )

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record, prefixing the message with the request ID if set.

        Args:
            record: Log record to format

        Returns:
            Formatted log string
        """
        request_id = getattr(record, "request_id", None)
        if request_id:
            record.msg = f"[{request_id}] {record.getMessage()}"
            record.args = ()

        return super().format(record)


def setup_logging(settings: Settings) -> None:
    """
    Configure application logging.

    Args:
        settings: Application settings
    """
    level = getattr(logging, settings.log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.addFilter(RequestIDFilter())
    console_handler.setFormatter(
        JSONFormatter() if settings.log_format == "json" else TextFormatter()
    )
    root_logger.addHandler(console_handler)

    for name, noisy_level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(noisy_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
