"""Logging setup for the command line."""

import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "csvfind"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def log_file_path(log_dir: Path, command: str, now: datetime | None = None) -> Path:
    """``<log_dir>/<command>_<YYYYmmddHHMMSS>.log``"""
    stamp = (now or datetime.now()).strftime("%Y%m%d%H%M%S")
    return Path(log_dir) / f"{command}_{stamp}.log"


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> logging.Logger:
    """Route ``csvfind`` logs to stderr through rich and optionally to a file.

    Calling it again replaces the handlers installed by a previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG if log_file is not None else level)

    console_handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger
