# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from todoapp.bootstrap import create_app
from todoapp.config import Settings
from todoapp.tasks.task_models import NEW_TASK_ID

_VARS = (
    "TODOAPP_APP_NAME",
    "TODOAPP_LOG_LEVEL",
    "TODOAPP_DATA_DIR",
    "TODOAPP_TASKS_DB_PATH",
    "TODOAPP_LIST_LOAD_DELAY",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so teardown also removes values written by load_dotenv()
    for name in _VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults() -> None:
    s = Settings.from_env(dotenv=False)
    assert s.app_name == "todoapp"
    assert s.log_level == "INFO"
    assert s.data_dir == Path(".local/todoapp")
    assert s.tasks_db_path == Path(".local/todoapp") / "tasks.sqlite3"
    assert s.list_load_delay == 0.0


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODOAPP_APP_NAME", "tasks")
    monkeypatch.setenv("TODOAPP_LOG_LEVEL", "debug")
    monkeypatch.setenv("TODOAPP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TODOAPP_LIST_LOAD_DELAY", "2")

    s = Settings.from_env(dotenv=False)
    assert s.app_name == "tasks"
    assert s.log_level == "DEBUG"
    assert s.data_dir == tmp_path
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.list_load_delay == 2.0


def test_malformed_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TODOAPP_LIST_LOAD_DELAY", "soon")
    assert Settings.from_env(dotenv=False).list_load_delay == 0.0

    monkeypatch.setenv("TODOAPP_LIST_LOAD_DELAY", "-5")
    assert Settings.from_env(dotenv=False).list_load_delay == 0.0


def test_dotenv_file_is_loaded_without_overriding_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    (tmp_path / ".env").write_text(
        "TODOAPP_APP_NAME=from-dotenv\nTODOAPP_LOG_LEVEL=WARNING\n", encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TODOAPP_LOG_LEVEL", "ERROR")

    s = Settings.from_env()
    assert s.app_name == "from-dotenv"
    assert s.log_level == "ERROR"


def test_create_app_wires_one_shared_repository(settings: Settings) -> None:
    app = create_app(settings)
    try:
        assert settings.tasks_db_path.exists()

        list_ctrl = app.task_list_controller()
        detail_ctrl = app.task_detail_controller()
        other_ctrl = app.task_detail_controller(5)

        assert list_ctrl._repo is app.repository
        assert detail_ctrl._repo is app.repository
        assert detail_ctrl.task_id == NEW_TASK_ID
        assert other_ctrl.task_id == 5
    finally:
        app.close()
