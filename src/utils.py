"""
Utility functions for calendar metadata processing
"""

import os
import sys
from datetime import timezone
from pathlib import Path
from typing import Optional

from dateutil import parser as date_parser
from loguru import logger


def ensure_directory(dir_path: str) -> str:
    """
    Ensure directory exists, create if it doesn't

    Args:
        dir_path: Directory path

    Returns:
        Absolute path to directory
    """
    path = Path(dir_path)
    path.mkdir(parents=True, exist_ok=True)
    return str(path.absolute())


def normalize_event_date(value: Optional[str]) -> Optional[str]:
    """
    Normalize a calendar date / date-time string to UTC ISO format

    Args:
        value: "2025-03-10", "2025-03-10T11:30:00-03:00", ...
               Naive values are taken as UTC.

    Returns:
        "2025-03-10T14:30:00.000Z" style string, or None if empty/unparseable
    """
    if not value:
        return None
    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Unparseable event date {value!r}: {e}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M:%S.") + f"{parsed.microsecond // 1000:03d}Z"


# Logging setup helper
def setup_logging(log_file: str = "logs/calendar_parser.log", level: str = "INFO"):
    """
    Setup logging configuration

    Args:
        log_file: Path to log file
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    # Remove default handler
    logger.remove()

    # Add console handler
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=level
    )

    # Add file handler
    log_dir = os.path.dirname(log_file)
    if log_dir:
        ensure_directory(log_dir)
    logger.add(
        log_file,
        rotation="10 MB",
        retention="30 days",
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    )

    logger.info("Logging initialized")
