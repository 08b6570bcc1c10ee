# src/todo_board/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable

from ..core.results import Err, RemoteCallFailure, Result
from ..core.state import AppState
from ..tasks.task_models import TaskRecord
from ..view.controller import TodoListController

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)

DETAILS_PREVIEW_LEN = 50


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        logger.debug("Command /%s args=%s", name, parts[1:])
        return await handler(state, parts[1:], emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def preview_text(text: str | None, limit: int = DETAILS_PREVIEW_LEN) -> str:
    text = (text or "").replace("\n", " ")
    return text if len(text) <= limit else text[: limit - 3] + "..."


def format_task_table(records: Iterable[TaskRecord], *, stale: bool = False) -> str:
    rows = list(records)
    lines: list[str] = []
    if stale:
        lines.append("(!) List may be out of date: the last refresh failed.")
    if not rows:
        lines.append("No tasks yet. Use /new to create one.")
        return "\n".join(lines)

    lines.append(f"{'ID':>4}  {'Summary':<40}  {'Created':<16}  Status / actions")
    for r in rows:
        acts = TodoListController.row_actions(r)
        parts = [acts.status_label] if acts.status_label else []
        if acts.can_edit:
            parts.append(f"[/edit {r.id}]")
        if acts.can_finish:
            parts.append(f"[/done {r.id}]")
        if acts.can_delete:
            parts.append(f"[/del {r.id}]")
        status = " ".join(parts)
        lines.append(f"{r.id:>4}  {r.summary:<40}  {r.created_at_label():<16}  {status}")
        if r.details:
            lines.append(f"{'':>4}  {preview_text(r.details)}")
    return "\n".join(lines)


def describe_result(result: Result, ok_text: str) -> str:
    if isinstance(result, Err):
        err = result.error
        # The mutation went through; only the follow-up refresh failed.
        if isinstance(err, RemoteCallFailure) and err.operation == "list":
            return f"{ok_text} But the list could not be refreshed: {err.message}"
        return f"Error: {err}"
    return ok_text


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        task_id = int(args[0])
    except ValueError:
        return None
    return task_id if task_id > 0 else None


async def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = state.controller.list_store
    backend = str(getattr(state.settings, "backend", "local"))
    fresh = "stale" if store.is_stale else "fresh"
    return (
        "Status:\n"
        f"  Backend: {backend}\n"
        f"  Tasks loaded: {len(store)} ({fresh})"
    )


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    ctrl = state.controller
    result = await ctrl.refresh()
    table = format_task_table(ctrl.list_store.records, stale=ctrl.list_store.is_stale)
    if isinstance(result, Err):
        return f"Error: {result.error}\n{table}"
    return table


async def cmd_new(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    state.controller.open_new()
    return "New task. Fill in the form (/cancel to abort)."


async def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /edit <id>"
    result = state.controller.open_edit(task_id)
    return describe_result(result, f"Editing task {task_id}. Press Enter to keep a value (/cancel to abort).")


async def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /done <id>"
    result = await state.controller.finish(task_id)
    return describe_result(result, f"Task {task_id} marked as completed.")


async def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /del <id>"
    result = await state.controller.delete(task_id)
    return describe_result(result, f"Task {task_id} deleted.")


async def cmd_upload(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /upload <path>"
    if emit:
        emit(f"Uploading {args[0]}...")
    report = await state.controller.upload(" ".join(args))
    return report.message


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show backend and list freshness.")
registry.register("list", cmd_list, help_text="Reload and show the task list.", aliases=["ls"])
registry.register("new", cmd_new, help_text="Open the form for a new task.")
registry.register("edit", cmd_edit, help_text="Edit a pending task: /edit <id>.")
registry.register("done", cmd_done, help_text="Mark a task as completed: /done <id>.", aliases=["finish"])
registry.register("del", cmd_delete, help_text="Delete a task: /del <id>.", aliases=["delete", "rm"])
registry.register("upload", cmd_upload, help_text="Upload a file: /upload <path>.")
