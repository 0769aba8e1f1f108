"""
Logging configuration for the time-travel package.

Provides:
- Console output (development)
- Optional rotating file log
- Level override through the TIMETRAVEL_LOG_LEVEL environment variable
"""

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    max_bytes: int = 1048576,
    backup_count: int = 3,
    console: bool = True,
) -> logging.Logger:
    """
    Initialize logging for the ``timetravel`` logger hierarchy.

    Only the package logger is configured so host applications keep
    control of the root logger. Calling it again replaces the handlers
    installed by the previous call.
    """
    level_str = os.environ.get("TIMETRAVEL_LOG_LEVEL", level)
    log_level = getattr(logging, level_str.upper(), logging.INFO)

    package_logger = logging.getLogger("timetravel")
    package_logger.setLevel(log_level)
    package_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        package_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.debug("logging configured (level=%s, file=%s)", level_str, log_file)
    return package_logger
