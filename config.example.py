# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TODOAPP_APP_NAME": "App display name (default: todoapp).",
    "TODOAPP_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "TODOAPP_DATA_DIR": "Local data directory, also used for logs (default: .local/todoapp).",
    "TODOAPP_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    # View state
    "TODOAPP_LIST_LOAD_DELAY": (
        "Seconds the task list waits before showing its first result (default: 0)."
    ),
}
