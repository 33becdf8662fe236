"""Centralized logging configuration for the AddedEmail backend."""

import logging
import sys
from typing import Optional

from app.constants import LOG_LEVEL

LOGGER_NAME = "added_email"


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure and return the application logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Other handlers (e.g. test capture) may be attached; look for ours
    if any(type(handler) is logging.StreamHandler for handler in logger.handlers):
        return logger

    level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Prevent duplicate logs
    logger.propagate = False

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger instance."""
    return logging.getLogger(LOGGER_NAME)


def log_database_event(
    operation: str,
    table: str,
    record_id: Optional[int] = None,
    user_id: Optional[str] = None,
    extra_data: Optional[dict] = None,
) -> None:
    """Log a committed write.

    Args:
        operation: Database operation (insert, update, delete)
        table: Database table name
        record_id: Optional record ID
        user_id: Optional principal performing the operation
        extra_data: Optional additional data to log
    """
    logger = get_logger()

    log_data = {
        "operation": operation,
        "table": table,
    }

    if record_id is not None:
        log_data["record_id"] = record_id

    if user_id:
        log_data["user_id"] = user_id

    if extra_data:
        log_data.update(extra_data)

    logger.info(f"Database event: {log_data}")


def log_policy_decision(
    operation: str,
    allowed: bool,
    policy: Optional[str] = None,
    user_id: Optional[str] = None,
    record_id: Optional[int] = None,
) -> None:
    """Log a row level security decision.

    Denials are logged at WARNING, grants at DEBUG.
    """
    logger = get_logger()

    log_data = {
        "operation": operation,
        "allowed": allowed,
        "policy": policy,
        "user_id": user_id or "anonymous",
    }

    if record_id is not None:
        log_data["record_id"] = record_id

    level = logging.DEBUG if allowed else logging.WARNING
    logger.log(level, f"Policy decision: {log_data}")


# Initialize logging on import
setup_logging(LOG_LEVEL)
