"""
Logging configuration utilities.

This module provides standardized logging setup for the pangenome tools.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(
    name: str = None,
    level: int = logging.INFO,
    console: bool = True,
    stream: Optional[TextIO] = None,
    format_string: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Set up a logger with an optional console handler.

    File output is attached separately with add_file_handler once the
    log directory is known.

    Args:
        name: Logger name (defaults to root logger if None)
        level: Logging level (default: INFO)
        console: Whether to add console handler (default: True)
        stream: Stream for the console handler (default: stdout)
        format_string: Log message format

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logging("pangenome")
        >>> add_file_handler(logger, Path("logs/run.log"))
        >>> logger.info("Run started")
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(format_string)

    # Console handler
    if console:
        console_handler = logging.StreamHandler(stream or sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def add_file_handler(
    logger: logging.Logger,
    log_file: Path,
    level: int = logging.INFO,
    format_string: str = DEFAULT_FORMAT,
) -> None:
    """
    Add a file handler to an existing logger.

    Args:
        logger: Logger instance to modify
        log_file: Path to log file
        level: Logging level for file handler
        format_string: Log message format
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(file_handler)
