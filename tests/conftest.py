# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_board.core.state import AppState
from todo_board.view.controller import TodoListController
from todo_board.view.list_store import ListStore

from .fakes import FakeTaskRemote, FakeUploader


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and AppState.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        backend="local",
        remote_base_url="http://todo.test/node/todo",
        remote_timeout_seconds=1.0,
        upload_authorization="authorization-text",
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
        upload_dir=tmp_path / "data" / "uploads",
    )


@pytest.fixture()
def remote() -> FakeTaskRemote:
    return FakeTaskRemote()


@pytest.fixture()
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture()
def controller(remote: FakeTaskRemote, uploader: FakeUploader) -> TodoListController:
    return TodoListController(ListStore(remote), remote, uploader=uploader)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    remote: FakeTaskRemote,
    uploader: FakeUploader,
    controller: TodoListController,
) -> AppState:
    """AppState wired with deterministic fakes instead of SQLite/HTTP."""
    return AppState(settings=settings, remote=remote, uploader=uploader, controller=controller)
