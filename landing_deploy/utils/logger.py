"""
Centralized logging configuration with colored output
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import colorlog


LOGS_DIR = Path(os.environ.get("LOG_DIR", "logs"))

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}


def setup_logger(
    name: str,
    level: str = "INFO",
    log_file: Optional[str] = None,
    console: bool = True
) -> logging.Logger:
    """
    Set up a logger with colored console output and optional file logging.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file name (saved in the logs directory)
        console: Whether to output to console

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    if console:
        console_handler = colorlog.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, level.upper()))
        console_handler.setFormatter(colorlog.ColoredFormatter(
            "%(log_color)s%(levelname)-8s%(reset)s %(blue)s[%(name)s]%(reset)s %(message)s",
            reset=True,
            log_colors=LOG_COLORS,
            style='%'
        ))
        logger.addHandler(console_handler)

    if log_file:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOGS_DIR / log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get or create a logger writing to the console and a daily log file.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level (defaults to $LOG_LEVEL or INFO)

    Returns:
        Configured logger instance
    """
    today = datetime.now().strftime("%Y-%m-%d")

    return setup_logger(
        name=name,
        level=level or os.environ.get("LOG_LEVEL", "INFO"),
        log_file=f"app_{today}.log",
        console=True
    )
