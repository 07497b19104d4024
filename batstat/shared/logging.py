"""Logging configuration utilities."""

import logging
from typing import List, Optional


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    quiet_loggers: Optional[List[str]] = None,
    log_file: Optional[str] = None,
) -> None:
    """Configure logging for batstat services.

    The root handler doubles as the error sink: stderr by default, or
    ``log_file`` when one is given.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_string: Custom format string for log messages.
        quiet_loggers: List of logger names to set to WARNING level.
        log_file: Append log records to this file instead of stderr.
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Convert string to logging level
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_file:
        logging.basicConfig(
            level=log_level,
            format=format_string,
            filename=log_file,
        )
    else:
        logging.basicConfig(
            level=log_level,
            format=format_string,
        )

    for logger_name in quiet_loggers or []:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
