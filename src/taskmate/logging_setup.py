# src/taskmate/logging_setup.py

"""
Process-wide logging for the taskmate CLI.

stderr shows taskmate records at the configured level (TASKMATE_LOG_LEVEL) and
anything else only from ERROR up. The log file under the data dir keeps every
record, so store repairs and swallowed persistence errors can be inspected later.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskmate.log"

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: int | str, default: int = logging.WARNING) -> int:
    """Accept 10 or "debug"; unknown names give `default`."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else default


class _TaskmateOnlyFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "taskmate" or record.name.startswith("taskmate."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskmate",
    console_level: int | str = logging.WARNING,
    file_level: int | str = logging.DEBUG,
    file_name: str = LOG_FILE_NAME,
) -> Path:
    """Replace the root handlers with a stderr handler and a file handler; return the file path."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / file_name

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolve_level(console_level))
    console.setFormatter(formatter)
    console.addFilter(_TaskmateOnlyFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(resolve_level(file_level, logging.DEBUG))
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file


def setup_logging_from_settings(settings) -> Path:
    """Wire Settings.log_level and Settings.data_dir into setup_logging."""
    return setup_logging(
        log_dir=settings.data_dir,
        console_level=getattr(settings, "log_level", "WARNING"),
    )
