# src/todoapp/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

UNASSIGNED_ID = 0
NEW_TASK_ID = -1  # navigation sentinel: "open the editor for a new task"


def is_unassigned(task_id: int) -> bool:
    return int(task_id) <= UNASSIGNED_ID


def to_store_precision(dt: datetime) -> datetime:
    """Aware UTC, truncated to the millisecond precision the store keeps. Naive input is taken as UTC."""
    dt = dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def now_utc() -> datetime:
    return to_store_precision(datetime.now(tz=UTC))


class Priority(StrEnum):
    """
    Task priority.

    Stored by name. Unknown stored values decode to MEDIUM instead of failing.
    """

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


@dataclass(frozen=True, slots=True, kw_only=True)
class Task:
    id: int = UNASSIGNED_ID
    title: str
    description: str = ""
    is_completed: bool = False
    created_date: datetime = field(default_factory=now_utc)
    due_date: datetime | None = None
    priority: Priority = Priority.MEDIUM

    def __post_init__(self) -> None:
        # Frozen: normalize timestamps so a stored task reads back equal.
        object.__setattr__(self, "created_date", to_store_precision(self.created_date))
        if self.due_date is not None:
            object.__setattr__(self, "due_date", to_store_precision(self.due_date))


@dataclass(frozen=True, slots=True)
class TaskRow:
    """Storage-shaped task: timestamps as epoch millis, priority as its name."""

    id: int
    title: str
    description: str
    is_completed: bool
    created_date: int
    due_date: int | None
    priority: str
