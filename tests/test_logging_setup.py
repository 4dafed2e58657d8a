# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

from todoapp.logging_setup import _ConsoleNoiseFilter, parse_level, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_keeps_app_logs_and_drops_third_party_noise() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("todoapp.tasks.task_store", logging.DEBUG))
    assert f.filter(_record("todoapp", logging.INFO))
    assert not f.filter(_record("todoapp_other", logging.INFO))
    assert not f.filter(_record("asyncio", logging.WARNING))
    assert f.filter(_record("asyncio", logging.ERROR))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert f.filter(_record("py.warnings", logging.ERROR))


def test_parse_level_accepts_names_and_numbers() -> None:
    assert parse_level("debug") == logging.DEBUG
    assert parse_level(" WARNING ") == logging.WARNING
    assert parse_level(logging.ERROR) == logging.ERROR
    assert parse_level("chatty") == logging.INFO


def test_setup_logging_writes_file_named_after_app(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        log_file = setup_logging(
            log_dir=tmp_path / "logs", app_name="tasks", console_level="warning"
        )
        assert log_file == tmp_path / "logs" / "tasks.log"

        logging.getLogger("todoapp.test").debug("hello file")
        for h in root.handlers:
            h.flush()

        assert "hello file" in log_file.read_text(encoding="utf-8")
        console = [h for h in root.handlers if not isinstance(h, logging.FileHandler)]
        assert [h.level for h in console] == [logging.WARNING]
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
