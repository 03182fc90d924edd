# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskmate.config import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # Keep a developer's .env / shell from leaking into the assertions.
    monkeypatch.chdir(tmp_path)
    for name in (
        "TASKMATE_APP_NAME",
        "TASKMATE_LOG_LEVEL",
        "TASKMATE_CONSOLE_ENABLED",
        "TASKMATE_STORAGE_BACKEND",
        "TASKMATE_DATA_DIR",
        "TASKMATE_DB_PATH",
        "TASKMATE_TASKS_KEY",
        "TASKMATE_CATEGORIES_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()

    assert s.storage_backend == "json"
    assert s.data_dir == Path(".local/taskmate")
    assert s.db_path == Path(".local/taskmate/taskmate.sqlite3")
    assert s.tasks_key == "TASKMATE_TASKS"
    assert s.categories_key == "TASKMATE_CATEGORIES"
    assert s.console_enabled is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKMATE_STORAGE_BACKEND", "SQLite")
    monkeypatch.setenv("TASKMATE_DATA_DIR", str(tmp_path / "d"))
    monkeypatch.setenv("TASKMATE_CONSOLE_ENABLED", "off")
    monkeypatch.setenv("TASKMATE_LOG_LEVEL", "debug")

    s = Settings.from_env()

    assert s.storage_backend == "sqlite"
    assert s.data_dir == tmp_path / "d"
    assert s.db_path == tmp_path / "d" / "taskmate.sqlite3"
    assert s.console_enabled is False
    assert s.log_level == "DEBUG"


def test_unknown_backend_falls_back_to_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKMATE_STORAGE_BACKEND", "redis")

    assert Settings.from_env().storage_backend == "json"


def test_dotenv_file_is_read(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # load_dotenv writes into os.environ; register the key so teardown removes it.
    monkeypatch.setenv("TASKMATE_TASKS_KEY", "placeholder")
    monkeypatch.delenv("TASKMATE_TASKS_KEY")
    (tmp_path / ".env").write_text("TASKMATE_TASKS_KEY=FROM_DOTENV\n", "utf-8")

    s = Settings.from_env()

    assert s.tasks_key == "FROM_DOTENV"
