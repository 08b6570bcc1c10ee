# src/todo_board/view/controller.py

from __future__ import annotations

"""
View controller.

Owns the ListStore and the EditSession and is the only place that talks to
the remote on behalf of the view. Every successful mutation is followed by
a full ListStore.load(); nothing is patched locally.

Dependencies are injected (remote, list store, optional uploader) so the
controller never reaches for global state.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from ..core.ports import FileUploader, TaskRemote
from ..core.results import (
    Err,
    Ok,
    RemoteCallFailure,
    Result,
    SessionClosed,
    StaleReferenceFailure,
    SubmitInFlight,
    TaskViewError,
    TransitionRejected,
)
from ..tasks.task_models import TaskPhase, TaskRecord, UpdateIntent, UploadReport
from .edit_session import EditSession
from .list_store import ListStore

logger = logging.getLogger(__name__)

COMPLETED_LABEL = "Completed"

ListResult = Result[tuple[TaskRecord, ...], TaskViewError]


@dataclass(slots=True, frozen=True)
class RowActions:
    """Which actions the presentation may offer for one row."""

    can_edit: bool
    can_finish: bool
    can_delete: bool
    status_label: str


class TodoListController:
    def __init__(
        self,
        list_store: ListStore,
        remote: TaskRemote,
        *,
        uploader: FileUploader | None = None,
    ) -> None:
        self.list_store = list_store
        self.session = EditSession()
        self._remote = remote
        self._uploader = uploader
        self._submit_in_flight = False

    @property
    def submit_in_flight(self) -> bool:
        return self._submit_in_flight

    # ---- list ----

    async def refresh(self) -> ListResult:
        return await self.list_store.load()

    @staticmethod
    def row_actions(record: TaskRecord) -> RowActions:
        # pending -> finished -> removed; edit and finish only from pending.
        phase = record.phase
        pending = phase is TaskPhase.PENDING
        return RowActions(
            can_edit=pending,
            can_finish=pending,
            can_delete=phase is not TaskPhase.REMOVED,
            status_label=COMPLETED_LABEL if phase is TaskPhase.FINISHED else "",
        )

    # ---- modal ----

    def open_new(self) -> EditSession:
        self.session.open()
        return self.session

    def open_edit(self, task_id: int) -> Result[EditSession, TaskViewError]:
        record = self.list_store.get(task_id)
        if record is None:
            return Err(StaleReferenceFailure("edit", task_id))
        if not self.row_actions(record).can_edit:
            return Err(TransitionRejected(task_id, "edit", "task is already finished"))
        self.session.open(record)
        return Ok(self.session)

    def cancel(self) -> None:
        self.session.cancel()

    async def submit(self) -> ListResult:
        """
        Validate the form and send exactly one create or update.

        On remote failure the session stays open with drafts kept.
        On success the session closes and the list is reloaded.

        Only one submit runs at a time, even across cancel/reopen. If the
        form was cancelled or reopened while the call ran, the late result
        leaves the newer form alone but still reloads the list.
        """
        session = self.session
        if not session.is_open:
            return Err(SessionClosed())
        if self._submit_in_flight:
            logger.info("Submit ignored: previous submit still in flight (target_id=%s)", session.target_id)
            return Err(SubmitInFlight())

        validated = session.validate()
        if isinstance(validated, Err):
            return validated

        intent = session.build_intent(validated.value)
        generation = session.generation
        session.begin_submit()
        self._submit_in_flight = True
        try:
            if isinstance(intent, UpdateIntent):
                await self._remote.update_task(intent)
                logger.info("Task %s updated", intent.task_id)
            else:
                created = await self._remote.create_task(intent)
                logger.info("Task %s created", created.id)
        except RemoteCallFailure as exc:
            logger.warning("Submit failed (target_id=%s): %s", getattr(intent, "task_id", 0), exc)
            if session.generation == generation:
                session.fail_submit(str(exc))
            return Err(exc)
        finally:
            self._submit_in_flight = False
            if session.generation == generation:
                session.in_flight = False

        if session.generation == generation:
            session.reset()
        else:
            logger.info("Form changed while submit was running; keeping the current form open")
        return await self.list_store.load()

    # ---- single-record mutations ----

    async def finish(self, task_id: int) -> ListResult:
        record = self.list_store.get(task_id)
        if record is not None and not self.row_actions(record).can_finish:
            return Err(TransitionRejected(task_id, "finish", "task is already finished"))
        try:
            await self._remote.finish_task(task_id)
        except RemoteCallFailure as exc:
            logger.warning("Finish failed task_id=%s: %s", task_id, exc)
            return Err(exc)
        logger.info("Task %s -> finished", task_id)
        return await self.list_store.load()

    async def delete(self, task_id: int) -> ListResult:
        try:
            await self._remote.delete_task(task_id)
        except RemoteCallFailure as exc:
            logger.warning("Delete failed task_id=%s: %s", task_id, exc)
            return Err(exc)
        logger.info("Task %s -> removed", task_id)
        return await self.list_store.load()

    # ---- upload side channel ----

    async def upload(self, path: str | Path) -> UploadReport:
        path = Path(path)
        if self._uploader is None:
            return UploadReport(name=path.name, ok=False, message="Uploads are not configured.")
        report = await self._uploader.upload_file(path)
        if report.ok:
            logger.info("Upload ok: %s", report.name)
        else:
            logger.warning("Upload failed: %s (%s)", report.name, report.message)
        return report
