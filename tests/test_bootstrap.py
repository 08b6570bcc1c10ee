# tests/test_bootstrap.py

from __future__ import annotations

from pathlib import Path

import pytest

from todo_board.cli.bootstrap import create_initial_state
from todo_board.config import Settings
from todo_board.core.results import Ok
from todo_board.remote.http_client import HttpTaskRemote
from todo_board.remote.local_client import LocalFileUploader, LocalTaskRemote


@pytest.mark.asyncio
async def test_local_backend_wiring(settings) -> None:
    state = create_initial_state(settings=settings)

    assert isinstance(state.remote, LocalTaskRemote)
    assert isinstance(state.uploader, LocalFileUploader)
    assert settings.tasks_db_path.exists()
    assert settings.upload_dir.is_dir()

    state.controller.open_new().set_summary("Wired")
    result = await state.controller.submit()
    assert isinstance(result, Ok)
    assert [r.summary for r in result.value] == ["Wired"]


@pytest.mark.asyncio
async def test_http_backend_wiring(settings) -> None:
    settings.backend = "http"
    state = create_initial_state(settings=settings)

    assert isinstance(state.remote, HttpTaskRemote)
    assert state.uploader is state.remote
    await state.remote.aclose()


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TODO_BACKEND", "HTTP")
    monkeypatch.setenv("TODO_REMOTE_TIMEOUT_SECONDS", "not-a-number")
    monkeypatch.delenv("TODO_TASKS_DB_PATH", raising=False)
    monkeypatch.delenv("TODO_UPLOAD_DIR", raising=False)

    s = Settings.from_env()

    assert s.backend == "http"
    assert s.remote_timeout_seconds == 10.0
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.upload_dir == tmp_path / "uploads"


def test_unknown_backend_falls_back_to_local(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TODO_BACKEND", "carrier-pigeon")
    assert Settings.from_env().backend == "local"
