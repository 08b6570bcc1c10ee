# src/todo_board/view/list_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Iterator, Mapping
from typing import Any

from ..core.ports import TaskRemote
from ..core.results import Err, Ok, RemoteCallFailure, Result
from ..tasks.task_models import TaskRecord

logger = logging.getLogger(__name__)


class ListStore:
    """
    Local copy of the task list.

    The list is never patched record by record: every load() replaces it
    wholesale with what the remote returned. A failed load keeps the previous
    records but flags them as stale so the view can say so.
    """

    def __init__(self, remote: TaskRemote, *, filters: Mapping[str, Any] | None = None) -> None:
        self._remote = remote
        self._filters = dict(filters or {})
        self._records: tuple[TaskRecord, ...] = ()
        self.is_stale = True
        self.last_error: RemoteCallFailure | None = None
        self.loaded_at: float | None = None

    @property
    def records(self) -> tuple[TaskRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TaskRecord]:
        return iter(self._records)

    def get(self, task_id: int) -> TaskRecord | None:
        for record in self._records:
            if record.id == task_id:
                return record
        return None

    async def load(self) -> Result[tuple[TaskRecord, ...], RemoteCallFailure]:
        try:
            fetched = await self._remote.list_tasks(self._filters or None)
        except RemoteCallFailure as exc:
            self.is_stale = True
            self.last_error = exc
            logger.warning("List refresh failed, keeping %d cached records: %s", len(self._records), exc)
            return Err(exc)

        self._records = tuple(fetched)
        self.is_stale = False
        self.last_error = None
        self.loaded_at = time.time()
        logger.debug("List refreshed: %d records", len(self._records))
        return Ok(self._records)
