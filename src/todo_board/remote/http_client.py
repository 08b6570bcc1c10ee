# src/todo_board/remote/http_client.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx

from ..core.results import RemoteCallFailure, StaleReferenceFailure
from ..tasks.task_models import CreateIntent, TaskRecord, UpdateIntent, UploadReport

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:3000/node/todo"


def _make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


def _unwrap(payload: Any) -> Any:
    """Responses may be bare JSON or wrapped as {"data": ...}."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class HttpTaskRemote:
    """
    Remote collection endpoint over HTTP (JSON bodies, POST for every call).

    Status mapping:
    - 2xx -> success
    - 404 on an id-targeted call -> StaleReferenceFailure
    - anything else (non-2xx, transport error, bad JSON) -> RemoteCallFailure

    No retries: a failed call is reported once and the user decides.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout_seconds: float = 10.0,
        upload_authorization: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._upload_authorization = upload_authorization
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=_make_timeout(connect_s=min(5.0, timeout_seconds), read_s=timeout_seconds),
            transport=transport,
        )

    async def _post(self, operation: str, path: str, body: dict[str, Any], *, task_id: int | None = None) -> Any:
        try:
            resp = await self._client.post(path, json=body)
        except httpx.HTTPError as exc:
            logger.info("HTTP %s failed: %s", operation, exc.__class__.__name__)
            raise RemoteCallFailure(operation, f"network error ({exc.__class__.__name__})") from exc

        if resp.status_code == 404 and task_id is not None:
            raise StaleReferenceFailure(operation, task_id)
        if resp.is_error:
            raise RemoteCallFailure(operation, f"HTTP {resp.status_code}")
        if not resp.content:
            return None
        try:
            return _unwrap(resp.json())
        except ValueError as exc:
            raise RemoteCallFailure(operation, "malformed JSON response") from exc

    @staticmethod
    def _record(operation: str, data: Any) -> TaskRecord:
        if not isinstance(data, dict):
            raise RemoteCallFailure(operation, "expected a task object in the response")
        try:
            return TaskRecord.from_wire(data)
        except (TypeError, ValueError) as exc:
            raise RemoteCallFailure(operation, f"bad task payload: {exc}") from exc

    async def list_tasks(self, filters: Mapping[str, Any] | None = None) -> list[TaskRecord]:
        data = await self._post("list", "/list", {"filter": dict(filters or {})})
        if data is None:
            return []
        if not isinstance(data, list):
            raise RemoteCallFailure("list", "expected a list of tasks in the response")
        return [self._record("list", item) for item in data]

    async def create_task(self, intent: CreateIntent) -> TaskRecord:
        data = await self._post("create", "/create", intent.to_fields())
        return self._record("create", data)

    async def update_task(self, intent: UpdateIntent) -> TaskRecord:
        data = await self._post("update", "/update", intent.to_fields(), task_id=intent.task_id)
        return self._record("update", data)

    async def delete_task(self, task_id: int) -> None:
        await self._post("delete", "/delete", {"id": int(task_id)}, task_id=task_id)

    async def finish_task(self, task_id: int) -> None:
        await self._post("finish", "/finish", {"id": int(task_id)}, task_id=task_id)

    async def upload_file(self, path: Path) -> UploadReport:
        name = path.name
        failed = UploadReport(name=name, ok=False, message=f"{name} file upload failed.")
        headers = {"authorization": self._upload_authorization} if self._upload_authorization else None
        try:
            with path.open("rb") as fh:
                resp = await self._client.post("/upload", files={"file": (name, fh)}, headers=headers)
        except OSError:
            logger.exception("Cannot read upload file %s", path)
            return failed
        except httpx.HTTPError as exc:
            logger.info("HTTP upload failed: %s", exc.__class__.__name__)
            return failed
        if resp.is_error:
            logger.info("HTTP upload rejected: %s -> %s", name, resp.status_code)
            return failed
        return UploadReport(name=name, ok=True, message=f"{name} file uploaded successfully")

    async def aclose(self) -> None:
        await self._client.aclose()
