"""
Application logger

Every module imports the shared instance:

    from utils.logger import logger

Console output always; in production errors and the combined stream are also
written to rotating files under settings.LOG_DIR.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from config import settings

SERVICE_NAME = "sora-prompt-genie"

# 5MB per file, 5 rotated files kept
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5

FILE_FORMAT = "%(asctime)s [%(levelname)s] " + SERVICE_NAME + " %(name)s: %(message)s"
CONSOLE_FORMAT = "%(asctime)s [%(levelname)s]: %(message)s"


def _resolve_level() -> int:
    if settings.is_development:
        return logging.DEBUG
    return getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)


def setup_logger(name: str = SERVICE_NAME) -> logging.Logger:
    """Create (or return the already configured) application logger"""
    log = logging.getLogger(name)
    if log.handlers:
        return log

    log.setLevel(_resolve_level())
    log.propagate = False

    console = logging.StreamHandler(sys.stdout)
    if settings.is_production:
        console.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    else:
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    log.addHandler(console)

    if settings.is_production:
        logs_dir = Path(settings.LOG_DIR)
        logs_dir.mkdir(parents=True, exist_ok=True)
        file_formatter = logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

        error_file = RotatingFileHandler(
            logs_dir / "error.log", maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT
        )
        error_file.setLevel(logging.ERROR)
        error_file.setFormatter(file_formatter)
        log.addHandler(error_file)

        combined_file = RotatingFileHandler(
            logs_dir / "combined.log", maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT
        )
        combined_file.setFormatter(file_formatter)
        log.addHandler(combined_file)

    return log


logger = setup_logger()
