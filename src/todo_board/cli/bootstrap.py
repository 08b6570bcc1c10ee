# src/todo_board/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the remote backend (local SQLite or HTTP),
- wires ListStore + controller into AppState.
"""

from __future__ import annotations

import logging

from ..config import BACKEND_HTTP, get_settings
from ..core.ports import FileUploader, TaskRemote
from ..core.state import AppState
from ..remote.http_client import HttpTaskRemote
from ..remote.local_client import LocalFileUploader, LocalTaskRemote
from ..tasks.task_store import TaskStore
from ..view.controller import TodoListController
from ..view.list_store import ListStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.upload_dir.mkdir(parents=True, exist_ok=True)


def _build_remote(settings) -> tuple[TaskRemote, FileUploader]:
    if getattr(settings, "backend", "local") == BACKEND_HTTP:
        http = HttpTaskRemote(
            settings.remote_base_url,
            timeout_seconds=float(settings.remote_timeout_seconds),
            upload_authorization=settings.upload_authorization or None,
        )
        logger.info("Using HTTP backend at %s", settings.remote_base_url)
        return http, http

    logger.info("Using local SQLite backend at %s", settings.tasks_db_path)
    return LocalTaskRemote(TaskStore(settings.tasks_db_path)), LocalFileUploader(settings.upload_dir)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    remote, uploader = _build_remote(settings)
    controller = TodoListController(ListStore(remote), remote, uploader=uploader)
    return AppState(settings=settings, remote=remote, uploader=uploader, controller=controller)
