# src/todoapp/viewstate/task_detail.py

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime

from ..core.ports import TaskRepo
from ..tasks.task_models import NEW_TASK_ID, UNASSIGNED_ID, Priority, Task, is_unassigned, now_utc
from .controller import ViewStateController, describe_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TaskDetailState:
    task: Task | None = None
    is_loading: bool = False
    error: str | None = None

    # editable fields
    title: str = ""
    description: str = ""
    is_completed: bool = False
    due_date: datetime | None = None
    priority: Priority = Priority.MEDIUM

    is_saving: bool = False


def _apply_loaded(state: TaskDetailState, task: Task | None) -> TaskDetailState:
    """
    Merge one getTaskById() emission into the editor state.

    The first task found seeds the edit fields; later emissions only refresh
    `task` so in-progress edits survive. An absent row is not an error.
    """
    if task is None:
        return replace(state, is_loading=False) if state.task is None else state
    if state.task is None:
        return replace(
            state,
            task=task,
            title=task.title,
            description=task.description,
            is_completed=task.is_completed,
            due_date=task.due_date,
            priority=task.priority,
            is_loading=False,
        )
    return replace(state, task=task)


class TaskDetailController(ViewStateController[TaskDetailState]):
    """
    Editor state for one task (existing id) or a new one (NEW_TASK_ID).

    save_task() returns an asyncio.Task[bool] completion signal; callers that
    navigate away after saving should await it first if they need the write
    to have landed.
    """

    def __init__(self, repo: TaskRepo, task_id: int = NEW_TASK_ID) -> None:
        super().__init__(TaskDetailState())
        self._repo = repo
        self._task_id = int(task_id)
        self._pending_save: asyncio.Task[bool] | None = None

    @property
    def task_id(self) -> int:
        return self._task_id

    @property
    def is_new_task(self) -> bool:
        return is_unassigned(self._task_id)

    def start(self) -> None:
        self._check_open()
        if self.is_new_task or self._subscription is not None:
            return
        self._state.update(lambda s: replace(s, is_loading=True))
        self._subscribe(self._load_task(), name=f"task-detail-{self._task_id}")

    async def _load_task(self) -> None:
        try:
            live = self._repo.get_task_by_id(self._task_id)
            try:
                async for task in live:
                    self._state.update(lambda s: _apply_loaded(s, task))
            finally:
                await live.aclose()
        except Exception as exc:
            logger.exception("Loading task failed task_id=%s", self._task_id)
            self._state.update(
                lambda s: replace(s, is_loading=False, error=describe_error(exc))
            )

    # ---- edit intents ----

    def on_title_change(self, title: str) -> None:
        self._state.update(lambda s: replace(s, title=title))

    def on_description_change(self, description: str) -> None:
        self._state.update(lambda s: replace(s, description=description))

    def on_completed_change(self, is_completed: bool) -> None:
        self._state.update(lambda s: replace(s, is_completed=is_completed))

    def on_due_date_change(self, due_date: datetime | None) -> None:
        self._state.update(lambda s: replace(s, due_date=due_date))

    def on_priority_change(self, priority: Priority) -> None:
        self._state.update(lambda s: replace(s, priority=priority))

    # ---- save ----

    def save_task(self) -> asyncio.Task[bool]:
        """
        Persist the current edit fields; resolves True on success, False on failure.

        While a save is in flight, further calls return that same task instead of
        starting another write (a new task is inserted exactly once).
        """
        self._check_open()
        if self._pending_save is not None and not self._pending_save.done():
            return self._pending_save
        state = self._state.update(lambda s: replace(s, is_saving=True, error=None))
        original = state.task
        to_save = Task(
            id=original.id if original is not None else UNASSIGNED_ID,
            title=state.title,
            description=state.description,
            is_completed=state.is_completed,
            created_date=original.created_date if original is not None else now_utc(),
            due_date=state.due_date,
            priority=state.priority,
        )
        self._pending_save = self._launch(self._save(to_save), name=f"save-task-{to_save.id}")
        return self._pending_save

    async def _save(self, task: Task) -> bool:
        try:
            if is_unassigned(task.id):
                new_id = await self._repo.insert_task(task)
                saved = replace(task, id=new_id)
                logger.info("Task created id=%s", new_id)
                self._state.update(lambda s: replace(s, task=saved, is_saving=False))
            else:
                await self._repo.update_task(task)
                logger.info("Task saved id=%s", task.id)
                self._state.update(lambda s: replace(s, is_saving=False))
        except Exception as exc:
            logger.warning("Saving task failed task_id=%s: %s", task.id, exc)
            self._state.update(
                lambda s: replace(s, is_saving=False, error=describe_error(exc))
            )
            return False
        return True
