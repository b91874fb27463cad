"""
Logging configuration

Module loggers come from get_logger(__name__) and propagate to the root
logger, which setup_logger configures once per process (API or script).
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

DEFAULT_LOGGER_NAME = "task-graph"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Driver chatter (heartbeats, command monitoring) stays at WARNING even when
# the application runs at DEBUG.
LIBRARY_LEVELS: Dict[str, int] = {
    'pymongo': logging.WARNING,
    'motor': logging.WARNING,
    # ErrorLoggingExtension already reports every GraphQL error once
    'strawberry.execution': logging.CRITICAL,
}


def _level(log_level: str) -> int:
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(
    name: Optional[str] = None,
    log_level: str = "INFO",
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Setup logger with console and optional file output

    Args:
        name: Logger name (None configures the root logger)
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            unknown names fall back to INFO
        log_file: Optional log file path

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(_level(log_level))

    # Reconfiguring (e.g. uvicorn reload) must not stack handlers
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for library, level in LIBRARY_LEVELS.items():
        logging.getLogger(library).setLevel(level)

    return logger


def setup_logger_from_config(config) -> logging.Logger:
    """Configure the root logger from the `logging` section of a Config"""
    return setup_logger(log_level=config.log_level, log_file=config.log_file or None)


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)
