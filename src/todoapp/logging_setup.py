# src/todoapp/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_level(level: str | int, default: int = logging.INFO) -> int:
    """Accept "debug", "INFO", 10, ...; unknown names fall back to default."""
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.strip().upper(), default)


class _ConsoleNoiseFilter(logging.Filter):
    """Console shows every record of the app's own loggers, everything else only at ERROR+."""

    def __init__(self, app_logger: str = "todoapp") -> None:
        super().__init__()
        self._app_logger = app_logger

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == self._app_logger or name.startswith(self._app_logger + "."):
            return True
        # third-party loggers and captured warnings ('py.warnings')
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path,
    app_name: str = "todoapp",
    console_level: str | int = "INFO",
    file_level: str | int = logging.DEBUG,
) -> Path:
    """
    Route logs to stderr (filtered) and to <log_dir>/<app_name>.log (everything).

    Replaces existing root handlers, so call it once at startup.
    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{app_name}.log"

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(parse_level(console_level))
    console.addFilter(_ConsoleNoiseFilter())

    file = logging.FileHandler(str(log_file), encoding="utf-8")
    file.setLevel(parse_level(file_level, logging.DEBUG))

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in (console, file):
        h.setFormatter(fmt)
        root.addHandler(h)

    logging.captureWarnings(True)
    return log_file
