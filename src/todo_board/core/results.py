# src/todo_board/core/results.py

from __future__ import annotations

"""
Typed outcomes for remote-backed operations.

Remote adapters raise TaskViewError subclasses; the view layer (ListStore,
controller) catches them at its boundary and hands callers an Ok/Err value,
so every caller has to look at the failure branch.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


class TaskViewError(Exception):
    """Base class for every failure surfaced to the user."""


class ValidationFailed(TaskViewError):
    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))


class RemoteCallFailure(TaskViewError):
    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")


class StaleReferenceFailure(RemoteCallFailure):
    """The targeted id is unknown (or already deleted) on the remote side."""

    def __init__(self, operation: str, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(operation, f"task {task_id} no longer exists")


class TransitionRejected(TaskViewError):
    def __init__(self, task_id: int, action: str, reason: str) -> None:
        self.task_id = task_id
        self.action = action
        super().__init__(f"cannot {action} task {task_id}: {reason}")


class SubmitInFlight(TaskViewError):
    def __init__(self) -> None:
        super().__init__("a submit is already in progress")


class SessionClosed(TaskViewError):
    def __init__(self) -> None:
        super().__init__("the edit form is not open")


@dataclass(slots=True, frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(slots=True, frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]
