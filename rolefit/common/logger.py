"""Logging infrastructure for rolefit.

Provides centralized logging configuration with support for both
file and console output, log rotation, and ISO 8601 timestamps.

Every record written through ``setup_logger`` handlers carries the version
of the role catalog in use, so directory builds and lookups can be traced
back to the role data they ran against::

    2024-06-01T12:00:00 [INFO] [rolefit.directory] [catalog 2024-06] Found 812 unique actions
"""

import logging
import logging.handlers
import os
from typing import Optional

DEFAULT_LOG_FORMAT = (
    "%(asctime)s [%(levelname)s] [%(name)s] [catalog %(catalog_version)s] %(message)s"
)
DEFAULT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Shown before any catalog has been loaded
NO_CATALOG = "-"


class CatalogContextFilter(logging.Filter):
    """Stamps records with the role catalog version currently in use."""

    def __init__(self) -> None:
        super().__init__()
        self.catalog_version = NO_CATALOG

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "catalog_version"):
            record.catalog_version = self.catalog_version
        return True


_catalog_context = CatalogContextFilter()


def set_catalog_version(version: Optional[str]) -> None:
    """Set the catalog version stamped on subsequent log records."""
    _catalog_context.catalog_version = version or NO_CATALOG


def get_catalog_version() -> str:
    return _catalog_context.catalog_version


def setup_logger(
    name: str,
    log_dir: str = "/var/log/rolefit",
    level: str = "INFO",
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    file_logging: bool = True,
    console_logging: bool = True,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Set up a logger with file and console handlers.

    Args:
        name: Logger name (typically "rolefit" or a component name)
        log_dir: Directory for log files
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Custom log format string; may use %(catalog_version)s
        date_format: Custom date format string (ISO 8601 by default)
        file_logging: Enable file logging
        console_logging: Enable console logging
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup log files to keep

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    level_upper = level.upper()
    if not isinstance(getattr(logging, level_upper, None), int):
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
    logger.setLevel(getattr(logging, level_upper))

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        log_format or DEFAULT_LOG_FORMAT, datefmt=date_format or DEFAULT_DATE_FORMAT
    )

    handlers = []
    if file_logging:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                os.path.join(log_dir, f"{name}.log"),
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        )
    if console_logging:
        handlers.append(logging.StreamHandler())

    # Handler-level so records propagated from component loggers are stamped too
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(_catalog_context)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger in the rolefit hierarchy.

    Component loggers are children of the "rolefit" logger so that a single
    ``setup_logger("rolefit")`` call configures all of them.

    Args:
        name: Component name (e.g. "directory")

    Returns:
        Logger instance
    """
    if name == "rolefit" or name.startswith("rolefit."):
        return logging.getLogger(name)
    return logging.getLogger(f"rolefit.{name}")
