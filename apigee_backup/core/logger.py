#!/usr/bin/env python3
"""
Logging configuration for Apigee Backup.
Provides consistent logging to both stdout and the runtime log file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

# Mapping from string levels to logging constants
LOG_LEVELS = {
    "OFF": logging.CRITICAL + 10,    # Higher than CRITICAL = disable all
    "DEBUG": logging.DEBUG,          # 10
    "INFO": logging.INFO,            # 20
    "WARNING": logging.WARNING,      # 30
    "WARN": logging.WARNING,         # 30 (alias)
    "ERROR": logging.ERROR,          # 40
    "CRITICAL": logging.CRITICAL,    # 50
    "FATAL": logging.CRITICAL,       # 50 (alias)
}

ROOT_LOGGER_NAME = "apigee_backup"

def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = "/var/log/apigee.log"
) -> logging.Logger:
    """
    Setup logging configuration.

    Every module logger lives under the ``apigee_backup`` namespace, so
    configuring the package logger here covers the whole program.

    Args:
        log_level: Logging level as string (OFF, DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file, or None for stdout only

    Returns:
        Configured logger instance

    Raises:
        ValueError: If log_level is invalid
    """
    level_str_upper = log_level.upper()
    if level_str_upper not in LOG_LEVELS:
        valid_levels = ", ".join(sorted(LOG_LEVELS.keys()))
        raise ValueError(
            f"Invalid log level: '{log_level}'. Must be one of: {valid_levels}"
        )

    numeric_level = LOG_LEVELS[level_str_upper]

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Close handlers from a previous setup so the log file is released
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    # Nothing will be logged at OFF, no handlers needed
    if level_str_upper == "OFF":
        logger.propagate = False
        return logger

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # 1. Console handler (mirrors the file for cron / container logs)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 2. File handler (append-only runtime log)
    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

            logger.debug(f"File logging enabled: {log_file}")
        except OSError as e:
            logger.warning(f"Could not setup file logging: {e}")

    # Prevent propagation to root logger
    logger.propagate = False

    return logger
