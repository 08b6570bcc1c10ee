# src/todo_board/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..view.controller import TodoListController
from .ports import FileUploader, TaskRemote


@dataclass
class AppState:
    # Settings-like object (config.Settings or a test SimpleNamespace).
    settings: Any

    remote: TaskRemote
    uploader: FileUploader | None
    controller: TodoListController
