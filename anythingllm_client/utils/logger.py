"""
Logging utilities.

WHAT: Centralized logging configuration for the client package
WHY: Consistent log format and easy logger access
HOW: Python logging with console and optional file handlers on the package logger
"""

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "anythingllm_client"


def setup_logging(level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """
    Configure package logging.

    WHAT: Attach console (and optionally file) handlers to the package logger
    WHY: Applications embedding the client decide whether they want our logs
    HOW: Create handlers with formatters, set level from argument

    Args:
        level: Log level name (DEBUG, INFO, ...)
        log_file: Optional path for a DEBUG-level file log

    Returns:
        The configured package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers
    package_logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(package_logger.level)
    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(console_formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        package_logger.addHandler(file_handler)

    package_logger.info(f"Logging initialized (level={level}, file={log_file or '-'})")
    return package_logger


def enable_debug_logging() -> None:
    """Lower the package logger to DEBUG without touching handlers."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
