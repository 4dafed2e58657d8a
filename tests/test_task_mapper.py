# tests/test_task_mapper.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from todoapp.tasks.task_mapper import from_epoch_millis, row_to_task, task_to_row, to_epoch_millis
from todoapp.tasks.task_models import Priority, Task, TaskRow

from .fakes import BASE_TIME, make_task


def test_row_to_task_and_back_is_identity() -> None:
    row = TaskRow(
        id=7,
        title="Pay rent",
        description="before the 5th",
        is_completed=True,
        created_date=1_767_225_600_123,
        due_date=1_767_830_400_000,
        priority="HIGH",
    )

    task = row_to_task(row)
    assert task.id == 7
    assert task.is_completed is True
    assert task.priority is Priority.HIGH
    assert task.created_date == datetime(2026, 1, 1, 0, 0, 0, 123000, tzinfo=UTC)
    assert task_to_row(task) == row


def test_task_to_row_and_back_is_identity() -> None:
    task = make_task(
        "Buy milk",
        id=3,
        description="2 liters",
        due_date=BASE_TIME + timedelta(days=2, milliseconds=250),
        priority=Priority.LOW,
    )
    assert row_to_task(task_to_row(task)) == task


def test_missing_due_date_maps_to_none_both_ways() -> None:
    task = make_task("No deadline")
    row = task_to_row(task)
    assert row.due_date is None
    assert row_to_task(row).due_date is None


def test_unknown_priority_decodes_to_medium() -> None:
    row = TaskRow(
        id=1,
        title="x",
        description="",
        is_completed=False,
        created_date=0,
        due_date=None,
        priority="URGENT",
    )
    assert row_to_task(row).priority is Priority.MEDIUM
    assert Priority.from_db("") is Priority.MEDIUM
    assert Priority.from_db(None) is Priority.MEDIUM
    assert Priority.from_db("low") is Priority.MEDIUM
    assert Priority.from_db("LOW") is Priority.LOW


def test_priority_is_stored_by_name() -> None:
    for p in Priority:
        assert task_to_row(make_task("t", priority=p)).priority == p.name


def test_epoch_millis_conversions() -> None:
    assert to_epoch_millis(datetime(1970, 1, 1, tzinfo=UTC)) == 0
    assert from_epoch_millis(1500) == datetime(1970, 1, 1, 0, 0, 1, 500000, tzinfo=UTC)

    # naive datetimes are taken as UTC
    assert to_epoch_millis(datetime(1970, 1, 1, 0, 0, 2)) == 2000

    # other offsets are normalized
    plus_two = timezone(timedelta(hours=2))
    assert to_epoch_millis(datetime(1970, 1, 1, 2, 0, tzinfo=plus_two)) == 0


def test_default_task_values() -> None:
    task = Task(title="Plain")
    assert task.id == 0
    assert task.description == ""
    assert task.is_completed is False
    assert task.due_date is None
    assert task.priority is Priority.MEDIUM
    assert task.created_date.tzinfo is not None
    assert task.created_date.microsecond % 1000 == 0


def test_task_timestamps_are_normalized_to_stored_precision() -> None:
    task = Task(
        title="x",
        created_date=datetime(2026, 3, 1, 8, 0, 0, 123456),
        due_date=datetime(2026, 3, 2, 9, 30, 0, 987654, tzinfo=UTC),
    )
    assert task.created_date == datetime(2026, 3, 1, 8, 0, 0, 123000, tzinfo=UTC)
    assert task.due_date == datetime(2026, 3, 2, 9, 30, 0, 987000, tzinfo=UTC)
    assert row_to_task(task_to_row(task)) == task


def test_sub_millisecond_and_naive_inputs_round_trip() -> None:
    naive = Task(title="naive", created_date=datetime(2026, 3, 1, 8, 0))
    assert naive.created_date.tzinfo is UTC
    assert row_to_task(task_to_row(naive)) == naive

    now = Task(title="now", due_date=datetime.now(UTC))
    assert row_to_task(task_to_row(now)) == now

    plus_two = timezone(timedelta(hours=2))
    shifted = Task(title="shifted", created_date=datetime(2026, 3, 1, 10, 0, tzinfo=plus_two))
    assert shifted.created_date == BASE_TIME


def test_out_of_range_millis_saturate_instead_of_failing() -> None:
    far_future = TaskRow(
        id=1,
        title="far",
        description="",
        is_completed=False,
        created_date=-(2**62),
        due_date=2**62,
        priority="LOW",
    )
    task = row_to_task(far_future)
    assert task.due_date == datetime.max.replace(microsecond=999000, tzinfo=UTC)
    assert task.created_date == datetime.min.replace(tzinfo=UTC)
