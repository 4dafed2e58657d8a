# src/todoapp/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from collections.abc import Iterator
from pathlib import Path

from ..core.live import InvalidationTracker, LiveQuery
from .task_models import TaskRow, is_unassigned

logger = logging.getLogger(__name__)

TASKS_TABLE = "tasks"

_ORDER_BY = "ORDER BY created_date DESC, id DESC"


class StorageError(RuntimeError):
    """A persistence operation failed (I/O, constraint violation, corrupt file...)."""


class TaskStore:
    """
    SQLite task record store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    - mutations are serialized by a store-level lock

    Every committed mutation invalidates the tasks table, which makes all
    live queries re-run and re-emit.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._write_lock = threading.Lock()
        self.tracker = InvalidationTracker()
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _connect(self, action: str) -> Iterator[sqlite3.Connection]:
        """Short-lived connection; commits on success, maps sqlite errors to StorageError."""
        try:
            conn = self._get_conn()
        except sqlite3.Error as exc:
            raise StorageError(f"{action} failed: {exc}") from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            with contextlib.suppress(sqlite3.Error):
                conn.rollback()
            raise StorageError(f"{action} failed: {exc}") from exc
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._connect("schema setup") as conn:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    created_date INTEGER NOT NULL,
                    due_date INTEGER,
                    priority TEXT NOT NULL DEFAULT 'MEDIUM'
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("is_completed", "INTEGER NOT NULL DEFAULT 0")
            add_col("created_date", "INTEGER NOT NULL DEFAULT 0")
            add_col("due_date", "INTEGER")
            add_col("priority", "TEXT NOT NULL DEFAULT 'MEDIUM'")

            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_completed_created "
                "ON tasks(is_completed, created_date)"
            )

    @staticmethod
    def _row_from_sql(row: sqlite3.Row) -> TaskRow:
        return TaskRow(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            description=str(row["description"] or ""),
            is_completed=bool(row["is_completed"]),
            created_date=int(row["created_date"] or 0),
            due_date=int(row["due_date"]) if row["due_date"] is not None else None,
            priority=str(row["priority"] or ""),
        )

    def _select_many(self, where: str = "", params: tuple[object, ...] = ()) -> list[TaskRow]:
        sql = f"SELECT * FROM tasks {where} {_ORDER_BY}"
        with self._connect("query") as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._row_from_sql(r) for r in rows]

    def _changed(self) -> None:
        self.tracker.invalidate(TASKS_TABLE)

    # ---- mutations ----

    def insert(self, row: TaskRow) -> int:
        """
        Insert a row, replacing any existing row with the same id.

        An unassigned id (<= 0) gets a fresh id from SQLite; ids are never reused.
        """
        task_id = None if is_unassigned(row.id) else int(row.id)

        with self._write_lock, self._connect("insert") as conn:
            cur = conn.execute(
                """
                INSERT OR REPLACE INTO tasks(
                    id, title, description, is_completed,
                    created_date, due_date, priority
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task_id,
                    row.title,
                    row.description,
                    int(bool(row.is_completed)),
                    int(row.created_date),
                    row.due_date,
                    row.priority,
                ),
            )
            rowid = cur.lastrowid
        if rowid is None:
            raise StorageError("SQLite did not return lastrowid for tasks insert")

        new_id = int(rowid)
        logger.debug("Task inserted id=%s title=%r priority=%s", new_id, row.title, row.priority)
        self._changed()
        return new_id

    def update(self, row: TaskRow) -> int:
        """
        Overwrite every column of an existing row except created_date.

        Returns the number of rows changed; an unknown id is a no-op (0).
        """
        with self._write_lock, self._connect("update") as conn:
            cur = conn.execute(
                """
                UPDATE tasks
                SET title = ?,
                    description = ?,
                    is_completed = ?,
                    due_date = ?,
                    priority = ?
                WHERE id = ?
                """,
                (
                    row.title,
                    row.description,
                    int(bool(row.is_completed)),
                    row.due_date,
                    row.priority,
                    int(row.id),
                ),
            )
            n = cur.rowcount

        if n:
            logger.debug("Task updated id=%s", row.id)
            self._changed()
        else:
            logger.debug("Task update ignored, no row id=%s", row.id)
        return n

    def delete(self, row: TaskRow) -> int:
        with self._write_lock, self._connect("delete") as conn:
            n = conn.execute("DELETE FROM tasks WHERE id = ?", (int(row.id),)).rowcount
        if n:
            logger.debug("Task deleted id=%s", row.id)
            self._changed()
        return n

    def delete_all(self) -> int:
        with self._write_lock, self._connect("delete all") as conn:
            n = conn.execute("DELETE FROM tasks").rowcount
        logger.info("Deleted all tasks n=%s", n)
        if n:
            self._changed()
        return n

    # ---- queries ----

    def count_tasks(self) -> int:
        with self._connect("count") as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
        return int(n)

    def get_by_id(self, task_id: int) -> TaskRow | None:
        """Snapshot read; use query_by_id() to observe changes."""
        with self._connect("query by id") as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
        return self._row_from_sql(row) if row else None

    def query_all(self) -> LiveQuery[list[TaskRow]]:
        return LiveQuery(self.tracker, TASKS_TABLE, self._select_many)

    def query_by_id(self, task_id: int) -> LiveQuery[TaskRow | None]:
        return LiveQuery(self.tracker, TASKS_TABLE, lambda: self.get_by_id(task_id))

    def query_completed(self) -> LiveQuery[list[TaskRow]]:
        return LiveQuery(
            self.tracker, TASKS_TABLE, lambda: self._select_many("WHERE is_completed = 1")
        )

    def query_incomplete(self) -> LiveQuery[list[TaskRow]]:
        return LiveQuery(
            self.tracker, TASKS_TABLE, lambda: self._select_many("WHERE is_completed = 0")
        )
