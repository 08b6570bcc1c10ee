# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todo-board).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO).",
    # Remote
    "TODO_BACKEND": "Where tasks live: local (SQLite) or http (default: local).",
    "TODO_REMOTE_BASE_URL": "HTTP backend base URL (default: http://127.0.0.1:3000/node/todo).",
    "TODO_REMOTE_TIMEOUT_SECONDS": "HTTP read timeout in seconds (default: 10).",
    "TODO_UPLOAD_AUTHORIZATION": "authorization header sent with uploads (default: authorization-text).",
    # Paths (gitignored)
    "TODO_DATA_DIR": "Local data directory, also holds todo.log (default: .local/todo).",
    "TODO_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    "TODO_UPLOAD_DIR": "Local upload target directory (default: <data_dir>/uploads).",
}
