"""Logging configuration for savectl.

Library modules only create module-level loggers; handlers are installed
once by the front end through setup_logging().
"""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "savectl"

_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the savectl logger.

    Console output goes to stderr through Rich. WARNING is the default
    console level, DEBUG with verbose and ERROR with quiet. When log_file is
    given, every record at DEBUG and above is also appended to it.

    Args:
        verbose: Show debug records on the console.
        quiet: Only show errors on the console.
        log_file: Optional file receiving the full log.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Clear handlers from an earlier call (tests, repeated CLI invocations)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if verbose:
        console_level = logging.DEBUG
    elif quiet:
        console_level = logging.ERROR
    else:
        console_level = logging.WARNING

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=verbose,
    )
    console_handler.setLevel(console_level)
    logger.addHandler(console_handler)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            logger.warning("Cannot open log file %s: %s", log_file, e)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            logger.addHandler(file_handler)

    return logger
