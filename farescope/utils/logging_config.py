"""
Logging configuration for FareScope.

Provides structured logging with JSON format for files and production, and
human-readable colored output for development. Errors are additionally
written to a dedicated error log so failed lookups can be reviewed after a
collection run.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from farescope.config import Settings

RESERVED_FIELDS = {
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
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON objects with consistent fields:
    - timestamp: ISO format timestamp
    - level: Log level (INFO, WARNING, ERROR, etc.)
    - logger: Logger name
    - message: Log message
    - module, function, line: Call site
    - any extra fields passed via ``extra=``
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in RESERVED_FIELDS and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output in development."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"

        formatted = super().format(record)

        record.levelname = levelname

        return formatted


def _rotating_handler(
    path: str, level: int, formatter: logging.Formatter, max_bytes: int, backup_count: int
) -> logging.Handler:
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None,
    error_log_file: Optional[str] = None,
    console_output: bool = True,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format on the console (recommended for production)
        log_file: Optional path to a general log file (always JSON)
        error_log_file: Optional path to an error-only log file
        console_output: Enable console output (default: True)
        max_bytes: Maximum size of a log file before rotation (default: 10MB)
        backup_count: Number of rotated files to keep (default: 5)

    Examples:
        >>> setup_logging(level="DEBUG")
        >>> setup_logging(level="INFO", json_format=True, log_file="logs/farescope.log")
    """
    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if level.upper() not in valid_levels:
        level = "INFO"
    numeric_level = getattr(logging, level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = ColoredFormatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        root_logger.addHandler(
            _rotating_handler(log_file, numeric_level, JSONFormatter(), max_bytes, backup_count)
        )

    if error_log_file:
        error_formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        root_logger.addHandler(
            _rotating_handler(
                error_log_file, logging.ERROR, error_formatter, max_bytes, backup_count
            )
        )

    # Keep SQL echo out of the collector output unless debugging
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level.upper() == "DEBUG" else logging.WARNING
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={level}, json_format={json_format}, "
        f"log_file={log_file}, error_log_file={error_log_file}"
    )


def setup_logging_from_settings(settings: Settings, console_output: bool = True) -> None:
    """Configure logging from application settings."""
    setup_logging(
        level=settings.log_level,
        json_format=settings.json_logs or settings.environment == "production",
        log_file=settings.log_file,
        error_log_file=settings.error_log_file,
        console_output=console_output,
    )


def get_logger(name: str, extra_fields: Optional[Dict[str, Any]] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional extra fields for context.

    Examples:
        >>> logger = get_logger(__name__, {"group": "europe-athens"})
        >>> logger.info("Collecting fares")
    """
    return logging.LoggerAdapter(logging.getLogger(name), extra_fields or {})
