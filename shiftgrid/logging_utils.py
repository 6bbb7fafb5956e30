"""
Logging utilities for the shift grid.

This module sets up the console logging used by the CLI and the desktop
grid, and offers small helpers for consistently formatted messages.
"""

import logging
import sys
from typing import Iterable, Optional

LOGGER_NAME = 'shiftgrid'


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors the level name for terminal output.
    """

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        """Format log record with a colored level name."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
            )

        formatted = super().format(record)

        # Restore so other handlers see the plain name
        record.levelname = levelname

        return formatted


def setup_logging(verbose: bool = False, use_colors: bool = True) -> logging.Logger:
    """
    Configure the application logger.

    Args:
        verbose: If True, log at DEBUG level; otherwise INFO
        use_colors: If True and stdout is a terminal, color the level names

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)

    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    # Repeated setup (tests, GUI relaunch) must not stack handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if use_colors and sys.stdout.isatty():
        formatter = ColoredFormatter(fmt='%(levelname)-8s | %(message)s')
    else:
        formatter = logging.Formatter(fmt='%(levelname)-8s | %(message)s')

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get the application logger, or one of its children.

    Args:
        name: Optional child name, e.g. 'csv_import'

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f'{LOGGER_NAME}.{name}')
    return logging.getLogger(LOGGER_NAME)


def log_section(title: str, logger: Optional[logging.Logger] = None):
    """
    Log a section header.

    Args:
        title: Section title
        logger: Logger instance (uses default if None)
    """
    if logger is None:
        logger = get_logger()

    logger.info("")
    logger.info("=" * 60)
    logger.info(f"  {title}")
    logger.info("=" * 60)


def log_step(step: str, logger: Optional[logging.Logger] = None):
    """Log a processing step."""
    if logger is None:
        logger = get_logger()

    logger.info(f"→ {step}")


def log_error(error: str, logger: Optional[logging.Logger] = None):
    """Log an error message with consistent formatting."""
    if logger is None:
        logger = get_logger()

    logger.error(f"✗ {error}")


def log_errors(errors: Iterable[str], logger: Optional[logging.Logger] = None):
    """
    Log every message of a collected error list, in order.

    Args:
        errors: Error messages
        logger: Logger instance (uses default if None)
    """
    for error in errors:
        log_error(error, logger)


def log_success(message: str, logger: Optional[logging.Logger] = None):
    """Log a success message."""
    if logger is None:
        logger = get_logger()

    logger.info(f"✓ {message}")


def log_warning(warning: str, logger: Optional[logging.Logger] = None):
    """Log a warning message."""
    if logger is None:
        logger = get_logger()

    logger.warning(f"⚠ {warning}")
