"""Logging configuration with file and console handlers."""

import logging
import sys
from datetime import datetime
from pathlib import Path

from tubebridge.settings import settings

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOG_DATE_FORMAT = "%H:%M:%S"
_LOGGERS_CACHE: dict[str, logging.Logger] = {}


def setup_logger(
    name: str,
    level: int | None = None,
    log_dir: Path | None = None,
) -> logging.Logger:
    """Configure and return a named tubebridge logger.

    Args:
        name: Logger name (e.g., 'transport.downloader').
        level: Logging level. If None, uses LOG_LEVEL from settings.
        log_dir: Directory for log files. If None, uses LOG_DIR from settings.

    Returns:
        Configured logger instance.
    """
    if name in _LOGGERS_CACHE:
        return _LOGGERS_CACHE[name]

    if level is None:
        level = logging.getLevelName(settings.logging.level)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(_LOG_FORMAT, _LOG_DATE_FORMAT)
    logger.addHandler(_create_console_handler(formatter, level))

    file_handler = _create_file_handler(name, formatter, level, log_dir)
    if file_handler:
        logger.addHandler(file_handler)

    _LOGGERS_CACHE[name] = logger
    return logger


def _create_console_handler(
    formatter: logging.Formatter,
    level: int,
) -> logging.StreamHandler:
    """Create a stdout handler."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _create_file_handler(
    name: str,
    formatter: logging.Formatter,
    level: int,
    log_dir: Path | None,
) -> logging.FileHandler | None:
    """Create a dated file handler.

    Args:
        name: Logger name for filename.
        formatter: Log formatter.
        level: Logging level.
        log_dir: Directory for log files.

    Returns:
        Configured FileHandler or None when the file cannot be opened.
    """
    try:
        log_path = _get_log_file_path(name, log_dir)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setLevel(level)
        handler.setFormatter(formatter)
        return handler
    except OSError as e:
        print(f"Warning: Could not create log file: {e}", file=sys.stderr)
        return None


def _get_log_file_path(name: str, log_dir: Path | None) -> Path:
    """Build log file path with date suffix.

    Args:
        name: Logger name.
        log_dir: Base directory for logs.

    Returns:
        Full path to log file.
    """
    if log_dir is None:
        log_dir = Path(settings.logging.log_dir)

    log_dir.mkdir(parents=True, exist_ok=True)

    safe_name = name.replace(".", "_").replace("/", "_")
    date_suffix = datetime.now().strftime("%Y%m%d")
    return log_dir / f"{safe_name}_{date_suffix}.log"
