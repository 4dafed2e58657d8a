# src/todoapp/tasks/task_mapper.py

"""Conversion between storage rows and domain tasks (pure, no I/O)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from .task_models import Priority, Task, TaskRow

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)

# Stored values are int64; anything outside the datetime range saturates.
_MIN_MS = (datetime.min.replace(tzinfo=UTC) - _EPOCH) // _ONE_MS
_MAX_MS = (datetime.max.replace(tzinfo=UTC) - _EPOCH) // _ONE_MS


def to_epoch_millis(dt: datetime) -> int:
    # Naive datetimes are taken as UTC.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return (dt - _EPOCH) // _ONE_MS


def from_epoch_millis(ms: int) -> datetime:
    ms = min(max(int(ms), _MIN_MS), _MAX_MS)
    return _EPOCH + ms * _ONE_MS


def row_to_task(row: TaskRow) -> Task:
    return Task(
        id=row.id,
        title=row.title,
        description=row.description,
        is_completed=row.is_completed,
        created_date=from_epoch_millis(row.created_date),
        due_date=from_epoch_millis(row.due_date) if row.due_date is not None else None,
        priority=Priority.from_db(row.priority),
    )


def task_to_row(task: Task) -> TaskRow:
    return TaskRow(
        id=task.id,
        title=task.title,
        description=task.description,
        is_completed=task.is_completed,
        created_date=to_epoch_millis(task.created_date),
        due_date=to_epoch_millis(task.due_date) if task.due_date is not None else None,
        priority=Priority.from_db(task.priority).value,
    )
