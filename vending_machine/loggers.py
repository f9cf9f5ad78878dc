"""
Logging configuration for the vending machine.

This module provides a centralized logging setup with support for:
- Console output with colored formatting
- Optional file rotation with size limits
- Optional remote logging to Loki
"""

import logging
import time
from logging.handlers import RotatingFileHandler
from typing import Final, Optional

import colorlog
import httpx

from vending_machine.infrastructure.settings import get_settings


# =============================================================================
# Constants
# =============================================================================

DEFAULT_LOG_FORMAT: Final[str] = (
    "%(name)s | %(asctime)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s"
)
DEFAULT_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
MAX_LOG_FILE_SIZE: Final[int] = 5 * 1024 * 1024  # 5 MB
LOG_BACKUP_COUNT: Final[int] = 3
LOKI_TIMEOUT: Final[float] = 2.0


# =============================================================================
# Color Configuration
# =============================================================================

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


# =============================================================================
# Loki Integration
# =============================================================================

def send_to_loki(url: str, level: str, message: str, app: str) -> None:
    """
    Send a log entry to Loki.

    Args:
        url: Loki push endpoint.
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        message: Log message.
        app: Application name for Loki labels.
    """
    log_entry = {
        "streams": [
            {
                "stream": {"level": level, "app": app},
                "values": [[str(int(time.time() * 1e9)), message]],
            }
        ]
    }
    headers = {"Content-Type": "application/json"}
    with httpx.Client() as client:
        client.post(url, json=log_entry, headers=headers, timeout=LOKI_TIMEOUT)


class LokiHandler(logging.Handler):
    """
    Custom logging handler that sends logs to Loki.

    Attributes:
        url: Loki push endpoint.
        app: Application name for Loki labels.
    """

    def __init__(self, url: str, app: str) -> None:
        super().__init__()
        self.url = url
        self.app = app

    def emit(self, record: logging.LogRecord) -> None:
        """
        Emit a log record to Loki.

        Args:
            record: The log record to send.
        """
        try:
            message = self.format(record)
            level = record.levelname.upper()
            send_to_loki(self.url, level, message, self.app)
        except Exception:
            # handleError reports to stderr instead of logging recursively
            self.handleError(record)


# =============================================================================
# Handler Builders
# =============================================================================

def build_console_handler(level: int) -> logging.Handler:
    """Console handler with colored output."""
    console_formatter = colorlog.ColoredFormatter(
        f"%(name)s | %(log_color)s%(asctime)s | %(levelname)s | "
        f"%(funcName)s:%(lineno)d | %(message)s",
        datefmt=DEFAULT_DATE_FORMAT,
        log_colors=LOG_COLORS,
    )
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)
    return console_handler


def build_file_handler(log_file: str, level: int) -> logging.Handler:
    """Rotating file handler."""
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_FILE_SIZE,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter(fmt=DEFAULT_LOG_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    )
    return file_handler


def build_loki_handler(url: str, app: str, level: int) -> logging.Handler:
    """Loki push handler."""
    loki_handler = LokiHandler(url, app)
    loki_handler.setLevel(level)
    loki_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
            datefmt=DEFAULT_DATE_FORMAT,
        )
    )
    return loki_handler


def parse_level(level: str | int) -> int:
    """
    Resolve a level name such as ``"info"`` to its numeric value.

    Raises:
        ValueError: If the name is not a known logging level.
    """
    if isinstance(level, int):
        return level
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")
    return numeric_level


# =============================================================================
# Logger Factory
# =============================================================================

def get_logger(
    name: str,
    app: str = "vending_machine",
    log_file: Optional[str] = None,
    level: str | int = logging.DEBUG,
    loki_url: Optional[str] = None,
) -> logging.Logger:
    """
    Create and configure a logger with console, file, and Loki handlers.

    File and Loki handlers are only attached when a path or URL is given.

    Args:
        name: Logger name.
        app: Application name for Loki labels.
        log_file: Optional path to a rotating log file.
        level: Logging level (default: DEBUG).
        loki_url: Optional Loki push endpoint.

    Returns:
        Configured logger instance.
    """
    numeric_level = parse_level(level)
    logger_instance = logging.getLogger(name)
    logger_instance.setLevel(numeric_level)

    # Avoid duplicate handlers on repeated calls
    if logger_instance.handlers:
        return logger_instance

    logger_instance.addHandler(build_console_handler(numeric_level))

    if log_file:
        logger_instance.addHandler(build_file_handler(log_file, numeric_level))

    if loki_url:
        logger_instance.addHandler(build_loki_handler(loki_url, app, numeric_level))

    return logger_instance


def set_level(logger_instance: logging.Logger, level: str | int) -> None:
    """Change the level of a logger and all of its handlers."""
    numeric_level = parse_level(level)
    logger_instance.setLevel(numeric_level)
    for handler in logger_instance.handlers:
        handler.setLevel(numeric_level)


# =============================================================================
# Default Logger Instance
# =============================================================================

_logging_settings = get_settings().logging

logger = get_logger(
    name="VENDING_MACHINE",
    app=_logging_settings.app,
    log_file=_logging_settings.log_file,
    level=_logging_settings.level,
    loki_url=_logging_settings.loki_url,
)
