# src/todo_board/view/edit_session.py

from __future__ import annotations

"""
Modal form state.

The session only holds copies of field values. It never touches the
remote or the ListStore; the controller drives submit and refresh.
"""

from dataclasses import dataclass, field

from ..core.results import Err, Ok, Result, ValidationFailed
from ..tasks.task_models import (
    DETAILS_MAX_LEN,
    SUMMARY_MAX_LEN,
    SubmitIntent,
    TaskRecord,
    UpdateIntent,
    new_task,
)


@dataclass(slots=True, frozen=True)
class ValidatedFields:
    summary: str
    details: str | None


@dataclass(slots=True)
class EditSession:
    target_id: int = 0
    summary_draft: str = ""
    details_draft: str = ""
    is_open: bool = False
    validation_errors: dict[str, str] = field(default_factory=dict)
    submit_error: str | None = None
    in_flight: bool = False
    # Bumped on every open/reset; a submit only touches the session it started from.
    generation: int = 0

    @property
    def is_editing(self) -> bool:
        return self.target_id > 0

    def open(self, record: TaskRecord | None = None) -> None:
        if record is not None:
            self.target_id = int(record.id)
            self.summary_draft = record.summary or ""
            self.details_draft = record.details or ""
        else:
            self.target_id = 0
            self.summary_draft = ""
            self.details_draft = ""
        self.validation_errors = {}
        self.submit_error = None
        self.in_flight = False
        self.is_open = True
        self.generation += 1

    def set_summary(self, text: str | None) -> None:
        if self.is_open:
            self.summary_draft = text or ""

    def set_details(self, text: str | None) -> None:
        if self.is_open:
            self.details_draft = text or ""

    def validate(self) -> Result[ValidatedFields, ValidationFailed]:
        errors: dict[str, str] = {}

        summary = self.summary_draft.strip()
        if not summary:
            errors["summary"] = "Summary is required."
        elif len(summary) > SUMMARY_MAX_LEN:
            errors["summary"] = f"Summary must be at most {SUMMARY_MAX_LEN} characters."

        details = self.details_draft
        if len(details) > DETAILS_MAX_LEN:
            errors["details"] = f"Details must be at most {DETAILS_MAX_LEN} characters."

        self.validation_errors = errors
        if errors:
            return Err(ValidationFailed(errors))
        return Ok(ValidatedFields(summary=summary, details=details if details.strip() else None))

    def build_intent(self, fields: ValidatedFields) -> SubmitIntent:
        if self.target_id > 0:
            return UpdateIntent(task_id=self.target_id, summary=fields.summary, details=fields.details)
        return new_task(fields.summary, fields.details)

    def begin_submit(self) -> None:
        self.in_flight = True
        self.submit_error = None

    def fail_submit(self, message: str) -> None:
        # Stay open with drafts intact so the user can retry.
        self.in_flight = False
        self.submit_error = message

    def reset(self) -> None:
        self.target_id = 0
        self.summary_draft = ""
        self.details_draft = ""
        self.validation_errors = {}
        self.submit_error = None
        self.in_flight = False
        self.is_open = False
        self.generation += 1

    def cancel(self) -> None:
        self.reset()
