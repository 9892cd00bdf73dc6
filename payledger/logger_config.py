import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import Optional, Union

LOGGER_NAME = "payledger"
LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
LOG_LEVEL_ENV = "PAYLEDGER_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def default_level() -> str:
    """Log level from PAYLEDGER_LOG_LEVEL, falling back to WARNING."""
    return os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()


def setup_logging(level: Union[int, str, None] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the package logger with stderr output and an optional rotating file.

    stdout is left alone: it carries the account report. Calling this again
    replaces the handlers installed by a previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if level is None:
        level = default_level()
    logger.setLevel(level)
    logger.propagate = False

    fmt = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    logger.addHandler(console)

    if log_file:
        parent = os.path.dirname(log_file)
        if parent:
            os.makedirs(parent, exist_ok=True)
        file_handler = TimedRotatingFileHandler(log_file, when="midnight", backupCount=7, encoding="utf-8")
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)

    return logger
