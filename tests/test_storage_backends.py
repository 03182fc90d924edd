# tests/test_storage_backends.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmate.storage.kv import JsonFileStorage, MemoryStorage, SqliteStorage, build_storage
from taskmate.tasks.task_models import Task
from taskmate.tasks.task_store import TaskStore


@pytest.fixture(params=["json", "sqlite", "memory"])
def backend(request, tmp_path: Path):
    if request.param == "json":
        return JsonFileStorage(tmp_path / "slots")
    if request.param == "sqlite":
        return SqliteStorage(tmp_path / "kv.sqlite3")
    return MemoryStorage()


@pytest.mark.asyncio
async def test_get_set_remove(backend) -> None:
    assert await backend.get_item("TASKS") is None

    await backend.set_item("TASKS", "[1]")
    await backend.set_item("CATS", "[]")
    await backend.set_item("TASKS", "[2]")

    assert await backend.get_item("TASKS") == "[2]"
    assert await backend.get_item("CATS") == "[]"

    await backend.remove_item("TASKS")
    await backend.remove_item("TASKS")  # removing a missing slot is fine

    assert await backend.get_item("TASKS") is None
    assert await backend.get_item("CATS") == "[]"


@pytest.mark.asyncio
async def test_task_store_survives_reopen(backend, tmp_path: Path) -> None:
    await TaskStore(backend).save([Task(id="a", title="Tugas Mobile ✓")])

    assert [t.title for t in await TaskStore(backend).load()] == ["Tugas Mobile ✓"]


@pytest.mark.asyncio
async def test_json_storage_writes_one_file_per_slot(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path)

    await storage.set_item("TASKMATE_TASKS", "[]")

    assert (tmp_path / "TASKMATE_TASKS.json").read_text("utf-8") == "[]"
    assert not list(tmp_path.glob("*.tmp"))


def test_build_storage_picks_backend(tmp_path: Path) -> None:
    def settings(name: str) -> SimpleNamespace:
        return SimpleNamespace(
            storage_backend=name, data_dir=tmp_path, db_path=tmp_path / "kv.sqlite3"
        )

    assert isinstance(build_storage(settings("json")), JsonFileStorage)
    assert isinstance(build_storage(settings("sqlite")), SqliteStorage)
    assert isinstance(build_storage(settings("memory")), MemoryStorage)
    assert isinstance(build_storage(settings("redis")), JsonFileStorage)
