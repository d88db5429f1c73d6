"""
Logging Configuration

One stderr handler on the ``vinyl_shop`` logger so command output on stdout
stays clean. Long-running ``serve`` sessions can add a timestamped log file
that keeps a record of every import.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "vinyl_shop"

CONSOLE_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Libraries whose INFO/DEBUG chatter is only useful with --verbose
NOISY_LOGGERS = ("urllib3", "httpx")


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the package logger. Safe to call more than once.

    Args:
        verbose: DEBUG level, including HTTP library logs
        quiet: WARNING level
        log_file: Also append records to this file

    Returns:
        The configured ``vinyl_shop`` logger
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger
