"""
Logging Setup

Console output (coloured or JSON) plus an optional size-rotated log file,
all hanging off the package's "mirrorsync" logger.

Author: mirrorsync Project
License: MIT
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "mirrorsync"

CONSOLE_FORMAT = '[%(asctime)s] %(levelname)s - %(name)s - %(message)s'
FILE_FORMAT = '[%(asctime)s] %(levelname)s - %(name)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s'
JSON_CONSOLE_FIELDS = '%(asctime)s %(name)s %(levelname)s %(message)s'
JSON_FILE_FIELDS = '%(asctime)s %(name)s %(levelname)s %(module)s %(funcName)s %(lineno)d %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Console formatter that colours the level name with ANSI escapes."""

    RESET = '\033[0m'
    LEVEL_COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }

    def format(self, record):
        plain = record.levelname
        color = self.LEVEL_COLORS.get(plain)
        if color:
            record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # The same record reaches the file handler uncoloured
            record.levelname = plain


def _console_handler(level: int, json_format: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if json_format:
        handler.setFormatter(jsonlogger.JsonFormatter(JSON_CONSOLE_FIELDS))
    else:
        handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(level: int, path: str, max_bytes: int, backups: int, json_format: bool) -> logging.Handler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backups, encoding='utf-8')
    handler.setLevel(level)
    if json_format:
        handler.setFormatter(jsonlogger.JsonFormatter(JSON_FILE_FIELDS))
    else:
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_to_file: bool = False,
    log_file_path: str = "logs/mirrorsync.log",
    log_rotation_size: int = 10485760,  # 10MB
    log_retention_count: int = 5,
    json_format: bool = False
) -> logging.Logger:
    """
    (Re)configure the package logger.

    Calling it again replaces the handlers from the previous call, so the
    CLI can set up a bootstrap console logger first and the configured one
    later.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_to_file: Also write to a rotating log file
        log_file_path: Log file location
        log_rotation_size: Bytes before the file is rotated
        log_retention_count: Rotated files to keep
        json_format: Emit JSON objects instead of text lines

    Returns:
        The "mirrorsync" logger
    """
    level_name = str(log_level).upper()
    level = getattr(logging, level_name)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    logger.addHandler(_console_handler(level, json_format))
    if log_to_file:
        logger.addHandler(
            _file_handler(level, log_file_path, log_rotation_size, log_retention_count, json_format)
        )

    # Keep records away from whatever the host application put on the root logger
    logger.propagate = False

    logger.info(f"Logging initialized at {level_name} level")
    if log_to_file:
        logger.info(f"File logging enabled: {log_file_path}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module, always below the "mirrorsync" logger.

    Args:
        name: Usually __name__

    Returns:
        Logger instance
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
