# src/todoapp/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the view-state controllers.

Controllers depend on Protocols instead of concrete implementations.
This keeps storage swappable and makes testing easier (see tests/fakes.py).
"""

from typing import Protocol, TypeVar

from ..tasks.task_models import Task

T_co = TypeVar("T_co", covariant=True)


class LiveSequence(Protocol[T_co]):
    """Emits the current value on subscription, then again after every relevant change."""

    def __aiter__(self) -> LiveSequence[T_co]: ...
    async def __anext__(self) -> T_co: ...
    async def aclose(self) -> None: ...


class TaskRepo(Protocol):
    # Live reads (domain objects)
    def get_tasks(self) -> LiveSequence[list[Task]]: ...
    def get_task_by_id(self, task_id: int) -> LiveSequence[Task | None]: ...
    def get_completed_tasks(self) -> LiveSequence[list[Task]]: ...
    def get_incomplete_tasks(self) -> LiveSequence[list[Task]]: ...

    # Mutations (resolve once the write is durable)
    async def insert_task(self, task: Task) -> int: ...
    async def update_task(self, task: Task) -> None: ...
    async def delete_task(self, task: Task) -> None: ...
    async def delete_all_tasks(self) -> None: ...
