# src/todo_board/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the view core.

The controller and ListStore depend on Protocols instead of concrete remotes.
This keeps the SQLite adapter and the HTTP client swappable and makes testing easier.

Implementations raise RemoteCallFailure / StaleReferenceFailure
(see core/results.py); they never return partial data on failure.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from ..tasks.task_models import CreateIntent, TaskRecord, UpdateIntent, UploadReport


class TaskRemote(Protocol):
    """Remote collection endpoint: the source of truth for task records."""

    async def list_tasks(self, filters: Mapping[str, Any] | None = None) -> list[TaskRecord]: ...
    async def create_task(self, intent: CreateIntent) -> TaskRecord: ...
    async def update_task(self, intent: UpdateIntent) -> TaskRecord: ...
    async def delete_task(self, task_id: int) -> None: ...
    async def finish_task(self, task_id: int) -> None: ...
    async def aclose(self) -> None: ...


class FileUploader(Protocol):
    """
    Upload side channel.

    Reports success/failure per file instead of raising, so one bad file
    does not abort the view.
    """

    async def upload_file(self, path: Path) -> UploadReport: ...
