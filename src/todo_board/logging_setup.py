# src/todo_board/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "todo.log"

# Console floor per logger prefix; longest matching prefix wins.
# The store logs every row write at DEBUG, which would bury the form prompts.
CONSOLE_FLOORS: dict[str, int] = {
    "todo_board": logging.NOTSET,
    "todo_board.tasks.task_store": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}

# Logger levels for libraries that log every request at INFO/DEBUG.
LIBRARY_LEVELS: dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable.

    Records from a logger listed in `floors` (or one of its children) pass
    at or above that floor. Anything unlisted, including captured Python
    warnings, needs ERROR+.
    """

    def __init__(self, floors: dict[str, int] | None = None) -> None:
        super().__init__()
        self._floors = sorted((floors or CONSOLE_FLOORS).items(), key=lambda kv: len(kv[0]), reverse=True)

    def floor_for(self, name: str) -> int:
        for prefix, level in self._floors:
            if name == prefix or name.startswith(prefix + "."):
                return level
        return logging.ERROR

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.floor_for(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console handler on stderr (filtered) plus a full log file in log_dir.

    Replaces any handlers already on the root logger; returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    for name, level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(level)

    logging.captureWarnings(True)
    return log_file
