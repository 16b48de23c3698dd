"""
Shared Logger

Logging setup for the checkout service plus `ContextLogger`, which carries
key/value context (order number, buyer, cart) through a checkout.
"""

import copy
import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LINE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Chatty at INFO, raised to WARNING
QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "asyncio")


def _context_of(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "context", None) or {}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, context under "context"."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        context = _context_of(record)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter: colored level name, context appended as key=value."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self):
        super().__init__(LINE_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        # Records are shared between handlers
        record = copy.copy(record)
        color = self.LEVEL_COLORS.get(record.levelname)
        if color:
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        line = super().format(record)
        context = _context_of(record)
        if not context:
            return line
        return line + " | " + " ".join(f"{key}={value}" for key, value in context.items())


class ContextLogger:
    """
    Thin wrapper over a stdlib logger that attaches context to every record.

    Example:
        ```python
        log = get_service_logger("checkout").with_context(cart_id=cart.id)
        log.info("Order placed", total=order.total)
        ```
    """

    def __init__(self, name: str, context: dict[str, Any] | None = None):
        self._logger = logging.getLogger(name)
        self._context = dict(context or {})

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._context)

    def with_context(self, **fields: Any) -> "ContextLogger":
        return ContextLogger(self._logger.name, {**self._context, **fields})

    def _emit(self, level: int, message: str, fields: dict[str, Any], exc_info: bool = False) -> None:
        self._logger.log(level, message, exc_info=exc_info, extra={"context": {**self._context, **fields}})

    def info(self, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(logging.WARNING, message, fields)

    def exception(self, message: str, **fields: Any) -> None:
        self._emit(logging.ERROR, message, fields, exc_info=True)


def _build_formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        return JSONFormatter()
    if format_type == "colored":
        return ColoredFormatter()
    return logging.Formatter(LINE_FORMAT, datefmt=DATE_FORMAT)


def configure_logging(level: str = "INFO", format_type: str = "colored") -> None:
    """
    Configure the root logger with a single stdout handler.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'colored', 'json' or 'plain'
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter(format_type))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_service_logger(service_name: str) -> ContextLogger:
    """Context logger named `service.<name>`."""
    return ContextLogger(f"service.{service_name}", {"service": service_name})


__all__ = [
    "ColoredFormatter",
    "ContextLogger",
    "JSONFormatter",
    "configure_logging",
    "get_service_logger",
]
