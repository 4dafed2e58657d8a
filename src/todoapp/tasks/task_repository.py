# src/todoapp/tasks/task_repository.py

from __future__ import annotations

import asyncio
import logging

from ..core.live import LiveQuery
from .task_mapper import row_to_task, task_to_row
from .task_models import Task, TaskRow
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def _rows_to_tasks(rows: list[TaskRow]) -> list[Task]:
    return [row_to_task(r) for r in rows]


def _maybe_task(row: TaskRow | None) -> Task | None:
    return row_to_task(row) if row is not None else None


class TaskRepository:
    """
    The only component allowed to call TaskStore mutations.

    Reads are live queries mapped to domain Tasks; writes map the Task to a
    row and run the store call in a worker thread. StorageError from the
    store propagates unchanged.
    """

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    # ---- live reads ----

    def get_tasks(self) -> LiveQuery[list[Task]]:
        return self._store.query_all().map(_rows_to_tasks)

    def get_task_by_id(self, task_id: int) -> LiveQuery[Task | None]:
        return self._store.query_by_id(task_id).map(_maybe_task)

    def get_completed_tasks(self) -> LiveQuery[list[Task]]:
        return self._store.query_completed().map(_rows_to_tasks)

    def get_incomplete_tasks(self) -> LiveQuery[list[Task]]:
        return self._store.query_incomplete().map(_rows_to_tasks)

    # ---- mutations ----

    async def insert_task(self, task: Task) -> int:
        return await asyncio.to_thread(self._store.insert, task_to_row(task))

    async def update_task(self, task: Task) -> None:
        await asyncio.to_thread(self._store.update, task_to_row(task))

    async def delete_task(self, task: Task) -> None:
        await asyncio.to_thread(self._store.delete, task_to_row(task))

    async def delete_all_tasks(self) -> None:
        await asyncio.to_thread(self._store.delete_all)
