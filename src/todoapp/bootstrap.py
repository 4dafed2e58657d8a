# src/todoapp/bootstrap.py

"""
Composition root.

- loads settings once,
- ensures local (gitignored) directories exist,
- builds exactly one TaskStore and one TaskRepository,
- hands the shared repository to every controller it creates.

The presentation layer owns the controllers it asks for: it calls start()
when a screen appears and close() when it goes away.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import Settings, get_settings
from .logging_setup import setup_logging
from .tasks.task_models import NEW_TASK_ID
from .tasks.task_repository import TaskRepository
from .tasks.task_store import TaskStore
from .viewstate.task_detail import TaskDetailController
from .viewstate.task_list import TaskListController

logger = logging.getLogger(__name__)


@dataclass
class TodoApp:
    settings: Settings
    store: TaskStore
    repository: TaskRepository

    def task_list_controller(self) -> TaskListController:
        return TaskListController(self.repository, load_delay=self.settings.list_load_delay)

    def task_detail_controller(self, task_id: int = NEW_TASK_ID) -> TaskDetailController:
        return TaskDetailController(self.repository, task_id)

    def close(self) -> None:
        logger.info("Bye.")


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_app(settings: Settings | None = None, *, configure_logging: bool = False) -> TodoApp:
    """
    Create the application object graph from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if configure_logging:
        setup_logging(
            log_dir=settings.data_dir,
            app_name=settings.app_name,
            console_level=settings.log_level,
        )

    logger.info("Starting %s...", settings.app_name)

    store = TaskStore(settings.tasks_db_path)
    return TodoApp(settings=settings, store=store, repository=TaskRepository(store))
