"""Logger setup: Rich console output plus a persistent log file."""

import logging
import os
from pathlib import Path
from typing import Union

from rich.logging import RichHandler

from debian_setup.ui import console

LOGGER_NAME = "debian_setup"


def setup_logger(
    log_file: Union[str, Path], level: int = logging.DEBUG
) -> logging.Logger:
    """
    Configure a logger with Rich formatting and persistent file logging.

    Args:
        log_file: Path to the log file
        level: Minimum level for both handlers

    Returns:
        Configured logger instance
    """
    log_file = Path(log_file)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        markup=False,
        show_time=True,
        show_path=False,
    )
    rich_handler.setLevel(logging.INFO)
    logger.addHandler(rich_handler)

    fmt = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S"
    )
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)
        os.chmod(str(log_file), 0o600)
    except OSError as e:
        logger.warning(f"Could not set up file logging to {log_file}: {e}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger of the application logger, e.g. ``debian_setup.repos``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
