"""
Centralized logging configuration.

Library modules only call ``logging.getLogger(__name__)``; entry points
call :func:`setup_logger` once to attach handlers.
"""
import json
import logging
import logging.handlers
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .constants import LOG_FORMAT, LOG_MAX_SIZE_MB, LOG_BACKUP_COUNT


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line_no": record.lineno,
        }

        # Context passed through ``extra=``
        for key in ("document_id", "section_id", "block_id", "diagnostic"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)

        if record.exc_info:
            payload["exception_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            payload["stack_trace"] = ''.join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, ensure_ascii=False)


def setup_logger(
    name: str = None,
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Get or create a configured logger.

    Usage:
        from config.logging_config import setup_logger
        logger = setup_logger("composer", level="DEBUG")
        logger.info("Message here")

    Args:
        name: Logger name. If None, uses 'composer'.
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path for a rotating file handler.
        json_format: Use JSON lines for the file handler.

    Returns:
        Configured logging.Logger instance.
    """
    logger = logging.getLogger(name or 'composer')
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    # Console handler
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

    # File handler with rotation
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=LOG_MAX_SIZE_MB * 1024 * 1024,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Alias for setup_logger for convenience.

    Usage:
        from config.logging_config import get_logger
        logger = get_logger(__name__)
    """
    return setup_logger(name)
