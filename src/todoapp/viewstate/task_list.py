# src/todoapp/viewstate/task_list.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace

from ..core.ports import TaskRepo
from ..tasks.task_models import Task
from .controller import ViewStateController, describe_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TaskListState:
    tasks: tuple[Task, ...] = ()
    is_loading: bool = False
    error: str | None = None


class TaskListController(ViewStateController[TaskListState]):
    """
    State for the task list screen.

    States:
    - Loading: is_loading=True (after start()/reload())
    - Ready:   tasks populated, is_loading=False
    - Failed:  error set, is_loading=False; stays there until reload()

    load_delay (seconds) is waited once before the first emission is shown.
    """

    def __init__(self, repo: TaskRepo, *, load_delay: float = 0.0) -> None:
        super().__init__(TaskListState())
        self._repo = repo
        self._load_delay = max(0.0, float(load_delay))

    def start(self) -> None:
        if self._subscription is not None and not self._subscription.done():
            return
        self.reload()

    def reload(self) -> None:
        """Drop the current subscription (if any) and subscribe to getTasks() again."""
        self._check_open()
        self._state.update(lambda s: replace(s, is_loading=True, error=None))
        self._subscribe(self._collect_tasks(), name="task-list-subscription")

    async def _collect_tasks(self) -> None:
        first = True
        try:
            live = self._repo.get_tasks()
            try:
                async for tasks in live:
                    if first and self._load_delay:
                        await asyncio.sleep(self._load_delay)
                    first = False
                    snapshot = tuple(tasks)
                    self._state.update(
                        lambda s: replace(s, tasks=snapshot, is_loading=False, error=None)
                    )
            finally:
                await live.aclose()
        except Exception as exc:
            logger.exception("Task list subscription failed")
            self._state.update(
                lambda s: replace(s, is_loading=False, error=describe_error(exc))
            )

    # ---- intents ----

    def toggle_completion(self, task: Task) -> asyncio.Task[None]:
        updated = replace(task, is_completed=not task.is_completed)
        return self._launch(
            self._run_intent("toggle_completion", task.id, lambda: self._repo.update_task(updated)),
            name=f"toggle-completion-{task.id}",
        )

    def delete(self, task: Task) -> asyncio.Task[None]:
        return self._launch(
            self._run_intent("delete", task.id, lambda: self._repo.delete_task(task)),
            name=f"delete-task-{task.id}",
        )

    async def _run_intent(self, intent: str, task_id: int, op: Callable[[], Awaitable[None]]) -> None:
        try:
            await op()
        except Exception as exc:
            logger.exception("Intent %s failed task_id=%s", intent, task_id)
            self._state.update(lambda s: replace(s, error=describe_error(exc)))
