"""
Logging setup shared by the API process and the maintenance scripts.

Usage:
    from ledgerbook.core.logging import setup_logging
    setup_logging()
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7

NOISY_LOGGERS = [
    "sqlalchemy.engine",
    "httpx",
    "httpcore",
    "asyncio",
    "uvicorn.access",
]


def setup_logging(
    level: str | int = logging.INFO,
    log_file: str | None = None,
) -> logging.Logger:
    """Configure the root logger.

    Args:
        level: level name ("INFO") or numeric level
        log_file: optional path; rotated daily when given

    Returns:
        the configured root logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Re-running setup (tests, reload) must not stack handlers
    for handler in list(root_logger.handlers):
        if getattr(handler, "_ledgerbook", False):
            root_logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler._ledgerbook = True
    root_logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=path,
            when="midnight",
            interval=1,
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        file_handler._ledgerbook = True
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
