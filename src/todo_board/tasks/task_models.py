# src/todo_board/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

SUMMARY_MAX_LEN = 40
DETAILS_MAX_LEN = 200


class TaskPhase(StrEnum):
    """
    Task lifecycle phase.

    Transitions:
    - pending  --finish--> finished
    - pending|finished --delete--> removed
    There is no way back from finished or removed.
    """

    PENDING = "pending"
    FINISHED = "finished"
    REMOVED = "removed"

    @classmethod
    def from_flags(cls, *, is_finished: bool, is_deleted: bool) -> TaskPhase:
        if is_deleted:
            return cls.REMOVED
        if is_finished:
            return cls.FINISHED
        return cls.PENDING


def _flag(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in {"1", "true", "yes"}
    return bool(raw)


def _parse_created_at(raw: Any) -> float:
    """Accept epoch seconds, epoch milliseconds or an ISO-8601 string."""
    if raw is None or raw == "":
        return 0.0
    if isinstance(raw, (int, float)):
        ts = float(raw)
        # JS clients send milliseconds.
        return ts / 1000.0 if ts > 1e11 else ts
    s = str(raw).strip()
    try:
        return _parse_created_at(float(s))
    except ValueError:
        pass
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        # No offset means local wall-clock time.
        dt = dt.astimezone()
    return dt.timestamp()


@dataclass(slots=True, frozen=True)
class TaskRecord:
    id: int
    summary: str
    details: str | None
    is_finished: bool
    is_deleted: bool
    created_at: float

    @property
    def phase(self) -> TaskPhase:
        return TaskPhase.from_flags(is_finished=self.is_finished, is_deleted=self.is_deleted)

    def created_at_label(self) -> str:
        if not self.created_at:
            return ""
        return datetime.fromtimestamp(self.created_at).astimezone().strftime("%Y/%m/%d %H:%M")

    @classmethod
    def from_wire(cls, payload: dict[str, Any]) -> TaskRecord:
        """Build a record from the JSON shape used by the remote collection endpoint."""
        details = payload.get("details")
        return cls(
            id=int(payload.get("id") or 0),
            summary=str(payload.get("summary") or ""),
            details=None if details is None else str(details),
            is_finished=_flag(payload.get("is_finished", 0)),
            is_deleted=_flag(payload.get("is_del", payload.get("is_deleted", 0))),
            created_at=_parse_created_at(payload.get("createTime", payload.get("created_at"))),
        )


@dataclass(slots=True, frozen=True)
class CreateIntent:
    """
    Request to persist a new record.

    Build it with new_task() so the default flags are always explicit.
    """

    summary: str
    details: str | None
    is_finished: bool = False
    is_deleted: bool = False

    def to_fields(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "details": self.details,
            "is_finished": int(self.is_finished),
            "is_del": int(self.is_deleted),
        }


@dataclass(slots=True, frozen=True)
class UpdateIntent:
    """Request to change summary/details of an existing record. Never touches flags."""

    task_id: int
    summary: str
    details: str | None

    def to_fields(self) -> dict[str, Any]:
        return {"id": self.task_id, "summary": self.summary, "details": self.details}


SubmitIntent = CreateIntent | UpdateIntent


def new_task(summary: str, details: str | None = None) -> CreateIntent:
    return CreateIntent(summary=summary, details=details, is_finished=False, is_deleted=False)


@dataclass(slots=True, frozen=True)
class UploadReport:
    """Outcome of one file upload (side channel, unrelated to task records)."""

    name: str
    ok: bool
    message: str
