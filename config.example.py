# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKPAD_APP_NAME": "App display name (default: taskpad).",
    "TASKPAD_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "TASKPAD_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Persistence
    "TASKPAD_STORAGE_BACKEND": "Where tasks are kept: sqlite | file | memory (default: sqlite).",
    "TASKPAD_TASKS_KEY": "Key the task list is stored under (default: savedTasks).",
    "TASKPAD_STRICT_PERSISTENCE": "Report failed writes to the caller instead of only logging them.",
    # Paths (gitignored)
    "TASKPAD_DATA_DIR": "Local data directory, also holds taskpad.log (default: .local/taskpad).",
    "TASKPAD_DB_PATH": "SQLite file for the sqlite backend (default: <data_dir>/taskpad.sqlite3).",
    "TASKPAD_STORE_DIR": "Directory for the file backend (default: <data_dir>/store).",
}
