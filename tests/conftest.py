# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmate.core.state import AppState
from taskmate.storage.kv import MemoryStorage
from taskmate.tasks.category_store import CategoryStore
from taskmate.tasks.task_store import TaskStore

from .fakes import ScriptedConfirm, SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="TaskMate",
        log_level="INFO",
        console_enabled=False,
        storage_backend="memory",
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "taskmate.sqlite3",
        tasks_key="TASKMATE_TASKS",
        categories_key="TASKMATE_CATEGORIES",
    )


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture()
def task_store(storage: MemoryStorage, ids: SequentialIds) -> TaskStore:
    return TaskStore(storage, id_factory=ids)


@pytest.fixture()
def category_store(storage: MemoryStorage) -> CategoryStore:
    return CategoryStore(storage)


@pytest.fixture()
def confirm() -> ScriptedConfirm:
    # Press the affirmative button unless a test says otherwise.
    return ScriptedConfirm(choice="Delete")


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    task_store: TaskStore,
    category_store: CategoryStore,
    ids: SequentialIds,
    confirm: ScriptedConfirm,
) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: stores are real (over MemoryStorage) because their load/save
    behaviour is part of what the lifecycle tests check.
    """
    return AppState(
        settings=settings,
        task_store=task_store,
        category_store=category_store,
        id_factory=ids,
        confirm=confirm,
    )
