# src/todo_board/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from .task_models import DETAILS_MAX_LEN, SUMMARY_MAX_LEN, TaskRecord

logger = logging.getLogger(__name__)


class TaskNotFoundError(LookupError):
    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"task {task_id} not found")


class TaskStore:
    """
    SQLite todo store (the source of truth when running locally).

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Deletes are soft: is_deleted=1 rows are hidden from list_tasks()
    and rejected by every mutation.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS todos (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    summary TEXT NOT NULL,
                    details TEXT,
                    is_finished INTEGER NOT NULL DEFAULT 0,
                    is_deleted INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(todos)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE todos ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("details", "TEXT")
            add_col("is_finished", "INTEGER NOT NULL DEFAULT 0")
            add_col("is_deleted", "INTEGER NOT NULL DEFAULT 0")
            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_todos_deleted ON todos(is_deleted, created_at)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _check_fields(summary: str, details: str | None) -> str:
        summary = (summary or "").strip()
        if not summary:
            raise ValueError("summary is required")
        if len(summary) > SUMMARY_MAX_LEN:
            raise ValueError(f"summary longer than {SUMMARY_MAX_LEN} characters")
        if details is not None and len(details) > DETAILS_MAX_LEN:
            raise ValueError(f"details longer than {DETAILS_MAX_LEN} characters")
        return summary

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> TaskRecord:
        return TaskRecord(
            id=int(row["id"]),
            summary=str(row["summary"] or ""),
            details=row["details"],
            is_finished=bool(row["is_finished"]),
            is_deleted=bool(row["is_deleted"]),
            created_at=float(row["created_at"] or 0.0),
        )

    def _fetch_live(self, conn: sqlite3.Connection, task_id: int) -> sqlite3.Row:
        row = conn.execute(
            "SELECT * FROM todos WHERE id = ? AND is_deleted = 0", (int(task_id),)
        ).fetchone()
        if row is None:
            raise TaskNotFoundError(task_id)
        return row

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM todos").fetchone()
            return int(n)
        finally:
            conn.close()

    def list_tasks(self, *, is_finished: bool | None = None) -> list[TaskRecord]:
        """
        Return live (not soft-deleted) records, oldest first.

        is_finished narrows the result to finished / pending records.
        """
        sql = "SELECT * FROM todos WHERE is_deleted = 0"
        params: list[int] = []
        if is_finished is not None:
            sql += " AND is_finished = ?"
            params.append(int(is_finished))
        sql += " ORDER BY created_at ASC, id ASC"

        conn = self._get_conn()
        try:
            return [self._row_to_record(r) for r in conn.execute(sql, params).fetchall()]
        finally:
            conn.close()

    def add_task(
        self,
        *,
        summary: str,
        details: str | None = None,
        is_finished: bool = False,
        is_deleted: bool = False,
    ) -> TaskRecord:
        summary = self._check_fields(summary, details)
        now = time.time()

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO todos(summary, details, is_finished, is_deleted, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (summary, details, int(is_finished), int(is_deleted), now, now),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for todos insert")
            logger.debug("Task added id=%s finished=%s", rowid, is_finished)
            return TaskRecord(
                id=int(rowid),
                summary=summary,
                details=details,
                is_finished=bool(is_finished),
                is_deleted=bool(is_deleted),
                created_at=now,
            )
        finally:
            conn.close()

    def update_task(self, task_id: int, *, summary: str, details: str | None) -> TaskRecord:
        """Change summary/details only. Flags and created_at are left alone."""
        summary = self._check_fields(summary, details)

        conn = self._get_conn()
        try:
            self._fetch_live(conn, task_id)
            conn.execute(
                "UPDATE todos SET summary = ?, details = ?, updated_at = ? WHERE id = ?",
                (summary, details, time.time(), int(task_id)),
            )
            conn.commit()
            return self._row_to_record(self._fetch_live(conn, task_id))
        finally:
            conn.close()

    def mark_finished(self, task_id: int) -> None:
        conn = self._get_conn()
        try:
            self._fetch_live(conn, task_id)
            # Monotonic: there is no statement that sets is_finished back to 0.
            conn.execute(
                "UPDATE todos SET is_finished = 1, updated_at = ? WHERE id = ?",
                (time.time(), int(task_id)),
            )
            conn.commit()
        finally:
            conn.close()

    def mark_deleted(self, task_id: int) -> None:
        conn = self._get_conn()
        try:
            self._fetch_live(conn, task_id)
            conn.execute(
                "UPDATE todos SET is_deleted = 1, updated_at = ? WHERE id = ?",
                (time.time(), int(task_id)),
            )
            conn.commit()
        finally:
            conn.close()
