# src/todo_board/remote/local_client.py

from __future__ import annotations

"""
In-process remote backed by the SQLite TaskStore.

TaskStore is blocking, so every call runs in a worker thread via
asyncio.to_thread. Store exceptions are translated into the remote
failure types the view core understands.
"""

import asyncio
import logging
import shutil
import sqlite3
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..core.results import RemoteCallFailure, StaleReferenceFailure
from ..tasks.task_models import CreateIntent, TaskRecord, UpdateIntent, UploadReport
from ..tasks.task_store import TaskNotFoundError, TaskStore

logger = logging.getLogger(__name__)


class LocalTaskRemote:
    def __init__(self, store: TaskStore) -> None:
        self._store = store

    async def _call(self, operation: str, func, *args, **kwargs):
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except TaskNotFoundError as exc:
            raise StaleReferenceFailure(operation, exc.task_id) from exc
        except (ValueError, sqlite3.Error) as exc:
            logger.exception("TaskStore.%s failed", operation)
            raise RemoteCallFailure(operation, str(exc)) from exc

    async def list_tasks(self, filters: Mapping[str, Any] | None = None) -> list[TaskRecord]:
        is_finished = None
        if filters and filters.get("is_finished") is not None:
            is_finished = bool(filters["is_finished"])
        return await self._call("list", self._store.list_tasks, is_finished=is_finished)

    async def create_task(self, intent: CreateIntent) -> TaskRecord:
        return await self._call(
            "create",
            self._store.add_task,
            summary=intent.summary,
            details=intent.details,
            is_finished=intent.is_finished,
            is_deleted=intent.is_deleted,
        )

    async def update_task(self, intent: UpdateIntent) -> TaskRecord:
        return await self._call(
            "update",
            self._store.update_task,
            intent.task_id,
            summary=intent.summary,
            details=intent.details,
        )

    async def delete_task(self, task_id: int) -> None:
        await self._call("delete", self._store.mark_deleted, task_id)

    async def finish_task(self, task_id: int) -> None:
        await self._call("finish", self._store.mark_finished, task_id)

    async def aclose(self) -> None:
        # TaskStore uses short-lived connections per call.
        return None


class LocalFileUploader:
    """Copies uploaded files into a local directory."""

    def __init__(self, upload_dir: str | Path) -> None:
        self._upload_dir = Path(upload_dir)

    def _copy(self, path: Path) -> Path:
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        target = self._upload_dir / path.name
        shutil.copyfile(path, target)
        return target

    async def upload_file(self, path: Path) -> UploadReport:
        name = path.name
        if not path.is_file():
            return UploadReport(name=name, ok=False, message=f"{name} file upload failed.")
        try:
            target = await asyncio.to_thread(self._copy, path)
        except OSError:
            logger.exception("Local upload failed for %s", path)
            return UploadReport(name=name, ok=False, message=f"{name} file upload failed.")
        logger.debug("Stored upload %s -> %s", path, target)
        return UploadReport(name=name, ok=True, message=f"{name} file uploaded successfully")
