# src/taskmate/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is read from disk at import time except the local .env file.
- Every consumer also accepts an injected settings object (tests use SimpleNamespace).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "TASKMATE"

STORAGE_BACKENDS = ("json", "sqlite", "memory")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    return value if value in choices else default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    console_enabled: bool

    # ---- Storage ----
    storage_backend: str
    data_dir: Path
    db_path: Path

    # Key-value slot names (one slot per collection).
    tasks_key: str
    categories_key: str

    @staticmethod
    def from_env() -> "Settings":
        # .env is looked up from the working directory, like the data dir.
        load_dotenv(find_dotenv(usecwd=True), override=False)

        app_name = _env(_k("APP_NAME"), "TaskMate").strip() or "TaskMate"
        # Console log level; the log file always gets DEBUG.
        log_level = _env(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING"
        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        storage_backend = _env_choice(_k("STORAGE_BACKEND"), STORAGE_BACKENDS, "json")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskmate"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "taskmate.sqlite3")

        tasks_key = _env(_k("TASKS_KEY"), "TASKMATE_TASKS").strip() or "TASKMATE_TASKS"
        categories_key = (
            _env(_k("CATEGORIES_KEY"), "TASKMATE_CATEGORIES").strip() or "TASKMATE_CATEGORIES"
        )

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            storage_backend=storage_backend,
            data_dir=data_dir,
            db_path=db_path,
            tasks_key=tasks_key,
            categories_key=categories_key,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, reading the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
