# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from todoapp.config import Settings
from todoapp.tasks.task_repository import TaskRepository
from todoapp.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings pointing at a per-test tmp directory.

    Built directly instead of via Settings.from_env() to keep unit tests
    isolated from the developer's environment and .env file.
    """
    return Settings(
        app_name="todoapp-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
        list_load_delay=0.0,
    )


@pytest.fixture()
def store(tmp_path: Path) -> TaskStore:
    """Real SQLite store: its behaviour is part of what we want to test."""
    return TaskStore(tmp_path / "tasks.sqlite3")


@pytest.fixture()
def repo(store: TaskStore) -> TaskRepository:
    return TaskRepository(store)
