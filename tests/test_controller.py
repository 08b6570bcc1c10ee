# tests/test_controller.py

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from todo_board.core.results import (
    Err,
    Ok,
    RemoteCallFailure,
    SessionClosed,
    StaleReferenceFailure,
    SubmitInFlight,
    TransitionRejected,
    ValidationFailed,
)
from todo_board.tasks.task_models import CreateIntent, UpdateIntent
from todo_board.view.controller import TodoListController
from todo_board.view.list_store import ListStore

from .fakes import FakeTaskRemote, FakeUploader, make_record


def _controller(remote: FakeTaskRemote, uploader: FakeUploader | None = None) -> TodoListController:
    return TodoListController(ListStore(remote), remote, uploader=uploader)


@pytest.mark.asyncio
async def test_create_scenario_buy_milk(controller: TodoListController, remote: FakeTaskRemote) -> None:
    session = controller.open_new()
    assert session.target_id == 0
    session.set_summary("Buy milk")

    result = await controller.submit()

    assert remote.ops("create") == [
        ("create", CreateIntent(summary="Buy milk", details=None, is_finished=False, is_deleted=False))
    ]
    assert remote.ops("update") == []
    assert isinstance(result, Ok)
    assert [(r.summary, r.is_finished) for r in result.value] == [("Buy milk", False)]
    assert not controller.session.is_open


@pytest.mark.asyncio
async def test_update_scenario_old_to_new() -> None:
    remote = FakeTaskRemote([make_record(5, "Old", "x", is_finished=False)])
    ctrl = _controller(remote)
    await ctrl.refresh()

    opened = ctrl.open_edit(5)
    assert isinstance(opened, Ok)
    session = opened.value
    assert (session.summary_draft, session.details_draft) == ("Old", "x")

    session.set_summary("New")
    result = await ctrl.submit()

    assert remote.ops("update") == [("update", UpdateIntent(task_id=5, summary="New", details="x"))]
    assert remote.ops("create") == []
    assert isinstance(result, Ok)
    updated = ctrl.list_store.get(5)
    assert updated is not None
    assert updated.summary == "New"
    assert updated.is_finished is False


@pytest.mark.asyncio
async def test_invalid_submit_makes_no_remote_call(controller: TodoListController, remote: FakeTaskRemote) -> None:
    controller.open_new().set_summary("   ")

    result = await controller.submit()

    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationFailed)
    assert remote.calls == []
    assert controller.session.is_open


@pytest.mark.asyncio
async def test_submit_failure_keeps_session_open_with_drafts(
    controller: TodoListController, remote: FakeTaskRemote
) -> None:
    session = controller.open_new()
    session.set_summary("Retry me")
    session.set_details("some text")
    remote.fail_next["create"] = "HTTP 500"

    result = await controller.submit()

    assert isinstance(result, Err)
    assert isinstance(result.error, RemoteCallFailure)
    assert session.is_open
    assert session.submit_error == "create failed: HTTP 500"
    assert (session.summary_draft, session.details_draft) == ("Retry me", "some text")
    assert remote.ops("list") == []

    retry = await controller.submit()
    assert isinstance(retry, Ok)
    assert len(remote.ops("create")) == 2


@pytest.mark.asyncio
async def test_second_submit_while_in_flight_is_rejected(
    controller: TodoListController, remote: FakeTaskRemote
) -> None:
    remote.gate = asyncio.Event()
    controller.open_new().set_summary("Only once")

    first = asyncio.create_task(controller.submit())
    await asyncio.sleep(0)
    second = await controller.submit()

    assert isinstance(second, Err)
    assert isinstance(second.error, SubmitInFlight)

    remote.gate.set()
    assert isinstance(await first, Ok)
    assert len(remote.ops("create")) == 1


@pytest.mark.asyncio
async def test_late_submit_success_leaves_reopened_form_alone(
    controller: TodoListController, remote: FakeTaskRemote
) -> None:
    remote.gate = asyncio.Event()
    controller.open_new().set_summary("First")

    first = asyncio.create_task(controller.submit())
    await asyncio.sleep(0)
    controller.cancel()
    controller.open_new().set_summary("Second draft")

    remote.gate.set()
    result = await first

    assert isinstance(result, Ok)
    assert [r.summary for r in result.value] == ["First"]
    assert controller.session.is_open
    assert controller.session.summary_draft == "Second draft"
    assert not controller.session.in_flight
    assert len(remote.ops("list")) == 1


@pytest.mark.asyncio
async def test_late_submit_failure_does_not_mark_reopened_form(
    controller: TodoListController, remote: FakeTaskRemote
) -> None:
    remote.gate = asyncio.Event()
    remote.fail_next["create"] = "HTTP 500"
    controller.open_new().set_summary("First")

    first = asyncio.create_task(controller.submit())
    await asyncio.sleep(0)
    controller.cancel()
    controller.open_new().set_summary("Second draft")

    remote.gate.set()
    result = await first

    assert isinstance(result, Err)
    assert isinstance(result.error, RemoteCallFailure)
    assert controller.session.submit_error is None
    assert controller.session.summary_draft == "Second draft"


@pytest.mark.asyncio
async def test_cancel_and_reopen_cannot_start_a_second_create(
    controller: TodoListController, remote: FakeTaskRemote
) -> None:
    remote.gate = asyncio.Event()
    controller.open_new().set_summary("First")

    first = asyncio.create_task(controller.submit())
    await asyncio.sleep(0)
    controller.cancel()
    controller.open_new().set_summary("Second")

    second = await controller.submit()

    assert isinstance(second, Err)
    assert isinstance(second.error, SubmitInFlight)
    assert controller.submit_in_flight

    remote.gate.set()
    await first
    assert len(remote.ops("create")) == 1
    assert not controller.submit_in_flight

    # The reopened form can be sent once the first call is done.
    assert isinstance(await controller.submit(), Ok)
    assert [intent.summary for _, intent in remote.ops("create")] == ["First", "Second"]


@pytest.mark.asyncio
async def test_unexpected_remote_exception_clears_in_flight(
    controller: TodoListController, remote: FakeTaskRemote
) -> None:
    session = controller.open_new()
    session.set_summary("Crash once")
    remote.raise_next["create"] = RuntimeError("SQLite did not return lastrowid for todos insert")

    with pytest.raises(RuntimeError):
        await controller.submit()

    assert not controller.submit_in_flight
    assert not session.in_flight
    assert session.is_open

    retry = await controller.submit()
    assert isinstance(retry, Ok)
    assert not session.is_open


@pytest.mark.asyncio
async def test_submit_on_closed_session(controller: TodoListController, remote: FakeTaskRemote) -> None:
    result = await controller.submit()
    assert isinstance(result, Err)
    assert isinstance(result.error, SessionClosed)
    assert remote.calls == []


@pytest.mark.asyncio
async def test_cancel_makes_no_remote_call(controller: TodoListController, remote: FakeTaskRemote) -> None:
    controller.open_new().set_summary("Never saved")
    controller.cancel()

    assert remote.calls == []
    assert not controller.session.is_open
    assert controller.session.summary_draft == ""
    assert controller.session.target_id == 0


@pytest.mark.asyncio
async def test_finish_then_reload_hides_finish_and_edit() -> None:
    remote = FakeTaskRemote([make_record(1, "Walk dog")])
    ctrl = _controller(remote)
    await ctrl.refresh()

    result = await ctrl.finish(1)

    assert isinstance(result, Ok)
    assert remote.ops("finish") == [("finish", 1)]
    record = ctrl.list_store.get(1)
    assert record is not None and record.is_finished
    actions = ctrl.row_actions(record)
    assert not actions.can_finish
    assert not actions.can_edit
    assert actions.can_delete
    assert actions.status_label == "Completed"

    opened = ctrl.open_edit(1)
    assert isinstance(opened, Err)
    assert isinstance(opened.error, TransitionRejected)


@pytest.mark.asyncio
async def test_finish_on_finished_record_is_rejected_locally() -> None:
    remote = FakeTaskRemote([make_record(3, "Done already", is_finished=True)])
    ctrl = _controller(remote)
    await ctrl.refresh()

    result = await ctrl.finish(3)

    assert isinstance(result, Err)
    assert isinstance(result.error, TransitionRejected)
    assert remote.ops("finish") == []


@pytest.mark.asyncio
async def test_delete_removes_record_from_next_load() -> None:
    remote = FakeTaskRemote([make_record(1, "Keep"), make_record(2, "Drop", is_finished=True)])
    ctrl = _controller(remote)
    await ctrl.refresh()

    result = await ctrl.delete(2)

    assert isinstance(result, Ok)
    assert [r.id for r in result.value] == [1]
    assert ctrl.list_store.get(2) is None


@pytest.mark.asyncio
async def test_mutation_on_vanished_record_surfaces_stale_reference() -> None:
    remote = FakeTaskRemote([make_record(8, "Gone soon")])
    ctrl = _controller(remote)
    await ctrl.refresh()
    await remote.delete_task(8)

    result = await ctrl.finish(8)

    assert isinstance(result, Err)
    assert isinstance(result.error, StaleReferenceFailure)
    assert result.error.task_id == 8
    assert ctrl.list_store.get(8) is not None


@pytest.mark.asyncio
async def test_open_edit_unknown_id(controller: TodoListController) -> None:
    result = controller.open_edit(42)
    assert isinstance(result, Err)
    assert isinstance(result.error, StaleReferenceFailure)
    assert not controller.session.is_open


@pytest.mark.asyncio
async def test_mutation_ok_but_reload_failed_is_reported() -> None:
    remote = FakeTaskRemote([make_record(1, "A")])
    ctrl = _controller(remote)
    await ctrl.refresh()
    remote.fail_next["list"] = "timeout"

    result = await ctrl.delete(1)

    assert isinstance(result, Err)
    assert result.error.operation == "list"
    assert ctrl.list_store.is_stale
    assert remote.records[1].is_deleted


@pytest.mark.asyncio
async def test_upload_reports_per_file(tmp_path: Path) -> None:
    uploader = FakeUploader(reject={"bad.txt"})
    ctrl = _controller(FakeTaskRemote(), uploader)

    good = await ctrl.upload(tmp_path / "good.txt")
    bad = await ctrl.upload(tmp_path / "bad.txt")

    assert good.ok and good.message == "good.txt file uploaded successfully"
    assert not bad.ok and bad.message == "bad.txt file upload failed."


@pytest.mark.asyncio
async def test_upload_without_uploader() -> None:
    ctrl = _controller(FakeTaskRemote())
    report = await ctrl.upload("notes.md")
    assert not report.ok
    assert report.name == "notes.md"
