# src/taskmate/storage/kv.py

"""
Key-value storage backends.

Each persisted collection lives in one named slot holding JSON text.
All backends expose the same async API (get_item / set_item / remove_item)
and raise PersistenceFailure on storage errors.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import re
import sqlite3
import time
from pathlib import Path

from ..errors import PersistenceFailure
from ..core.ports import KeyValueStorage

logger = logging.getLogger(__name__)

_SAFE_KEY_RE = re.compile(r"[^A-Za-z0-9_.-]")


class MemoryStorage:
    """Process-local storage (tests, demos). Nothing survives a restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    async def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileStorage:
    """
    One file per slot: <directory>/<key>.json

    Writes go to a .tmp sibling first and are moved into place with os.replace,
    so a crash mid-write never leaves a truncated slot behind.
    Blocking file I/O runs in a worker thread.
    """

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)

    def path_for(self, key: str) -> Path:
        if not key:
            raise PersistenceFailure("storage key is required")
        return self._dir / f"{_SAFE_KEY_RE.sub('_', key)}.json"

    def _read(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text("utf-8")

    def _write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, "utf-8")
        os.replace(tmp, path)

    def _remove(self, key: str) -> None:
        path = self.path_for(key)
        with contextlib.suppress(FileNotFoundError):
            path.unlink()

    async def get_item(self, key: str) -> str | None:
        try:
            return await asyncio.to_thread(self._read, key)
        except OSError as e:
            raise PersistenceFailure(f"failed to read slot {key!r}: {e}") from e

    async def set_item(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._write, key, value)
        except OSError as e:
            raise PersistenceFailure(f"failed to write slot {key!r}: {e}") from e

    async def remove_item(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove, key)
        except OSError as e:
            raise PersistenceFailure(f"failed to remove slot {key!r}: {e}") from e


class SqliteStorage:
    """
    SQLite key-value table.

    Thread-safety:
    - each call opens its own short-lived SQLite connection (in a worker thread)
    """

    def __init__(self, db_path: str | Path = "taskmate.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteStorage ready db=%s", self._db_path)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _read(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row[0])
        finally:
            conn.close()

    def _write(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
        finally:
            conn.close()

    def _remove(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    async def get_item(self, key: str) -> str | None:
        try:
            return await asyncio.to_thread(self._read, key)
        except sqlite3.Error as e:
            raise PersistenceFailure(f"failed to read slot {key!r}: {e}") from e

    async def set_item(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._write, key, value)
        except sqlite3.Error as e:
            raise PersistenceFailure(f"failed to write slot {key!r}: {e}") from e

    async def remove_item(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove, key)
        except sqlite3.Error as e:
            raise PersistenceFailure(f"failed to remove slot {key!r}: {e}") from e


def build_storage(settings) -> KeyValueStorage:
    """Pick the backend named by settings.storage_backend (json | sqlite | memory)."""
    backend = str(getattr(settings, "storage_backend", "json")).lower()

    if backend == "sqlite":
        return SqliteStorage(settings.db_path)
    if backend == "memory":
        return MemoryStorage()
    if backend != "json":
        logger.warning("Unknown storage backend %r, falling back to json.", backend)
    return JsonFileStorage(settings.data_dir)
