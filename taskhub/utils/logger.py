"""
Logging setup shared by every module.

Each named logger writes to the console and to one size-rotated file per
process run, kept under ``$LOG_DIR/<YYYY-MM-DD>/``. ``LOG_LEVEL`` picks the
default level.
"""

import logging
import os
import sys
import time
from datetime import datetime, timedelta
from functools import cache
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
DEFAULT_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

FILE_FORMAT = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    "%Y-%m-%d %H:%M:%S",
)
CONSOLE_FORMAT = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s", "%Y-%m-%d %H:%M:%S"
)

ROTATE_AT_BYTES = 5 * 1024 * 1024
ROTATED_COPIES = 10
DIR_DATE_FORMAT = "%Y-%m-%d"


@cache
def run_log_file() -> Path:
    """Path of this process's log file, created on first use."""
    started = datetime.now()
    directory = LOG_DIR / started.strftime(DIR_DATE_FORMAT)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f"taskhub_{started:%Y-%m-%d_%H-%M-%S}.log"


class SafeRotatingFileHandler(RotatingFileHandler):
    """Keeps writing to the current file when a rollover cannot happen."""

    def doRollover(self):
        try:
            super().doRollover()
        except OSError as e:
            sys.stderr.write(f"Log rotation failed, keeping current file: {e}\n")


def _level(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def setup_logger(name: str, level: str = None) -> logging.Logger:
    logger = logging.getLogger(name)
    log_level = _level(level or DEFAULT_LOG_LEVEL)
    logger.setLevel(log_level)
    if logger.handlers:
        return logger

    console = logging.StreamHandler()
    console.setFormatter(CONSOLE_FORMAT)
    logger.addHandler(console)

    try:
        file_handler = SafeRotatingFileHandler(
            run_log_file(),
            maxBytes=ROTATE_AT_BYTES,
            backupCount=ROTATED_COPIES,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"File logging disabled for '{name}': {e}\n")
    else:
        file_handler.setFormatter(FILE_FORMAT)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def _expired_log_dirs(keep_days: int):
    if not LOG_DIR.is_dir():
        return
    cutoff = datetime.now() - timedelta(days=keep_days)
    for entry in LOG_DIR.iterdir():
        try:
            dated = datetime.strptime(entry.name, DIR_DATE_FORMAT)
        except ValueError:
            continue
        if entry.is_dir() and dated < cutoff:
            yield entry


def cleanup_old_logs(keep_days: int = 7) -> int:
    """Delete dated log directories older than ``keep_days``; returns how many went."""
    removed = 0
    for directory in _expired_log_dirs(keep_days):
        try:
            for log_file in directory.iterdir():
                log_file.unlink()
            directory.rmdir()
        except OSError as e:
            sys.stderr.write(f"Could not remove old logs in {directory}: {e}\n")
            continue
        removed += 1
    return removed


class RequestTimer:
    """Measures the wall time of a block in milliseconds."""

    def __init__(self):
        self.started_at = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "RequestTimer":
        self.started_at = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed_ms = (time.perf_counter() - self.started_at) * 1000
        return False
