"""
Logging setup for the voice call service.

All modules log through the ``voice_call`` logger. configure_logging()
attaches a stdout handler and, when the log directory is writable, a size
rotated file. The file location can be moved with ``LOG_FILE``.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

from voice_call.config.constants import LOGGER_NAME

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_LOG_FILE = Path(os.getenv("LOG_FILE", "logs/voice_call.log"))
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5


def _file_handler(log_file: Path) -> Optional[logging.Handler]:
    """Rotating handler for log_file, or None when it cannot be opened."""
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(log_file, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT)
    except OSError as e:
        print(f"File logging disabled ({log_file}): {e}", file=sys.stderr)
        return None


def _detach_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(
    level: str = LOG_LEVEL, log_file: Union[str, Path, None] = None
) -> logging.Logger:
    """
    Set up the service logger. Safe to call more than once; earlier handlers
    are closed and replaced.

    Args:
        level: Level name such as "DEBUG" or "info"; unknown names fall back to INFO
        log_file: Rotating log file path, defaults to DEFAULT_LOG_FILE

    Returns:
        logging.Logger: The configured ``voice_call`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    resolved = getattr(logging, level.upper(), None)
    logger.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    _detach_handlers(logger)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    file_handler = _file_handler(Path(log_file) if log_file else DEFAULT_LOG_FILE)
    if file_handler is not None:
        handlers.append(file_handler)

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    logger.info(f"Logging configured at {logging.getLevelName(logger.level)}")
    return logger
