# src/todo_board/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is read at import time except the .env file itself.
- Settings stay injectable: bootstrap accepts any object with the same attributes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TODO"

BACKEND_LOCAL = "local"
BACKEND_HTTP = "http"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Remote ----
    backend: str
    remote_base_url: str
    remote_timeout_seconds: float
    upload_authorization: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path
    upload_dir: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo-board").strip() or "todo-board"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        backend = _env(_k("BACKEND"), BACKEND_LOCAL).strip().lower()
        if backend not in (BACKEND_LOCAL, BACKEND_HTTP):
            backend = BACKEND_LOCAL

        remote_base_url = _env(_k("REMOTE_BASE_URL"), "http://127.0.0.1:3000/node/todo").strip()
        remote_timeout_seconds = max(0.5, _env_float(_k("REMOTE_TIMEOUT_SECONDS"), 10.0))
        upload_authorization = _env(_k("UPLOAD_AUTHORIZATION"), "authorization-text")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")
        upload_dir = _env_path(_k("UPLOAD_DIR"), data_dir / "uploads")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            backend=backend,
            remote_base_url=remote_base_url,
            remote_timeout_seconds=remote_timeout_seconds,
            upload_authorization=upload_authorization,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            upload_dir=upload_dir,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
