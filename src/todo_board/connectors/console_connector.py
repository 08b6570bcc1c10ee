# src/todo_board/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import describe_result, format_task_table, preview_text
from ..cli.commands import registry as command_registry
from ..core.results import Err, RemoteCallFailure, ValidationFailed
from ..core.state import AppState

logger = logging.getLogger(__name__)

CANCEL_WORDS = ("/cancel", "/c")
CLEAR_WORD = "-"


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def _ainput(prompt: str) -> str:
    # input() blocks; keep the event loop free for in-flight remote calls.
    return await asyncio.to_thread(input, prompt)


def _print_table(state: AppState) -> None:
    store = state.controller.list_store
    print(format_task_table(store.records, stale=store.is_stale))


async def _read_field(label: str, current: str) -> str | None:
    """
    Prompt for one form field.

    Returns None on cancel, the current draft on empty input,
    "" when the user types "-".
    """
    shown = preview_text(current) if current else ""
    raw = await _ainput(f"  {label} [{shown}]: ")
    value = raw.strip()
    if value.lower() in CANCEL_WORDS:
        return None
    if value == CLEAR_WORD:
        return ""
    return raw if value else current


async def run_edit_form(state: AppState) -> None:
    """Drive the modal form until it is submitted successfully or cancelled."""
    ctrl = state.controller
    session = ctrl.session

    while session.is_open:
        title = f"Edit task {session.target_id}" if session.is_editing else "New task"
        _print_ts(f"[FORM] {title} (Enter keeps a value, '-' clears it, /cancel aborts)")

        summary = await _read_field("Summary", session.summary_draft)
        if summary is None:
            ctrl.cancel()
            _print_ts("[FORM] Cancelled.")
            return
        session.set_summary(summary)

        details = await _read_field("Details", session.details_draft)
        if details is None:
            ctrl.cancel()
            _print_ts("[FORM] Cancelled.")
            return
        session.set_details(details)

        result = await ctrl.submit()
        if not isinstance(result, Err):
            _print_ts("[FORM] Saved.")
            _print_table(state)
            return

        err = result.error
        if isinstance(err, ValidationFailed):
            for field_name, message in session.validation_errors.items():
                _print_ts(f"[FORM] {field_name}: {message}")
            continue

        if isinstance(err, RemoteCallFailure) and err.operation == "list":
            _print_ts(describe_result(result, "[FORM] Saved."))
            _print_table(state)
            return

        if not session.is_open:
            return
        _print_ts(f"[FORM] {session.submit_error or err}. Your input is kept; submit again or /cancel.")


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "todo-board"))
    _print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    # Initial load, like opening the page.
    result = await state.controller.refresh()
    if isinstance(result, Err):
        _print_ts(f"Error: {result.error}")
    _print_table(state)

    while True:
        try:
            user_input = (await _ainput(">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            cmd_response = await command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is None:
            _print_ts("Not a command. Use /help to list available commands.")
            continue

        print(f"[{_ts_local()}] {cmd_response}")

        if state.controller.session.is_open:
            try:
                await run_edit_form(state)
            except (EOFError, KeyboardInterrupt):
                state.controller.cancel()
                print()
                _print_ts("[FORM] Cancelled.")

    logger.info("Console connector finished.")
