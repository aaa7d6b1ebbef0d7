"""
Logging configuration for rustgeiger.

Scanning modules log through `logging.getLogger(__name__)` and install no
handlers. A tool embedding the scanner calls setup_logging() with its
ScanConfig to route the `rustgeiger` logger tree to a rich console.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import DEFAULT_CONFIG, ScanConfig

LOGGER_NAME = "rustgeiger"

# ScanConfig.verbosity -> level of the rustgeiger logger
VERBOSITY_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(
    config: Optional[ScanConfig] = None, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route rustgeiger log records to stderr, at the config's verbosity.

    Handlers are attached to the `rustgeiger` logger only, so the host
    application's root logger is left alone. Calling this again replaces
    the handlers installed by the previous call.

    Args:
        config: Scan settings; only `verbosity` is read (defaults to DEFAULT_CONFIG)
        log_file: Optional file path to also append plain-text records to

    Returns:
        The configured `rustgeiger` logger
    """
    config = config or DEFAULT_CONFIG
    level = VERBOSITY_LEVELS[config.verbosity]
    verbose = config.verbosity == "verbose"

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            # File paths and snippets from Rust sources contain [brackets]
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)
    logger.setLevel(level)
    # Records are fully handled here; do not duplicate them on the root logger
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger under the rustgeiger namespace.

    Args:
        name: Module name (e.g., 'rustgeiger.api' or 'api')
              If None, returns the root rustgeiger logger
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)

    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)
