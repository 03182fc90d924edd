# src/taskmate/tasks/task_store.py

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from ..core.ports import IdFactory, KeyValueStorage, new_id
from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)

TASKS_KEY = "TASKMATE_TASKS"


def _coerce_id(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def migrate_task_records(
    records: Iterable[Any], id_factory: IdFactory = new_id
) -> tuple[list[dict[str, Any]], bool]:
    """
    Repair raw task records read from storage.

    Per record:
    - missing/falsy id       -> fresh id from id_factory
    - non-string id          -> its string form (7 -> "7", 7.0 -> "7")
    - id already seen        -> fresh id (later record loses)
    - legacy status "todo"   -> "pending"
    - non-object entries are dropped

    Returns (records, changed). Records that need no repair are returned as-is,
    so running the migration on its own output is a no-op.
    """
    records = list(records)
    out: list[dict[str, Any]] = []
    seen: set[str] = set()
    changed = False

    # Ids already present in the data are never handed out as fresh ids.
    taken: set[str] = set()
    for rec in records:
        if isinstance(rec, dict) and rec.get("id"):
            taken.add(_coerce_id(rec["id"]))

    def fresh_id() -> str:
        new = id_factory()
        while new in taken:
            new = id_factory()
        taken.add(new)
        return new

    for rec in records:
        if not isinstance(rec, dict):
            logger.warning("TaskStore migration: dropped non-object record %r", rec)
            changed = True
            continue

        fixed = dict(rec)
        rid = rec.get("id")
        if not rid:
            fixed["id"] = fresh_id()
        elif not isinstance(rid, str):
            fixed["id"] = _coerce_id(rid)

        if fixed["id"] in seen:
            fixed["id"] = fresh_id()

        if rec.get("status") == TaskStatus.TODO.value:
            fixed["status"] = TaskStatus.PENDING.value

        if fixed != rec:
            logger.info("TaskStore migration: repaired record id=%r -> %r", rid, fixed["id"])
            changed = True
            rec = fixed

        seen.add(rec["id"])
        out.append(rec)

    return out, changed


class TaskStore:
    """
    Task collection persisted as one JSON array in a key-value slot.

    Every load runs the record migration and writes the repaired collection back
    when anything changed, so each malformed record is repaired at most once.

    Fail-soft:
    - load() logs storage/parse errors and returns []
    - save()/clear() log errors and return normally
    Callers cannot tell "empty" from "failed to read".
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = TASKS_KEY,
        id_factory: IdFactory = new_id,
    ) -> None:
        self._storage = storage
        self._key = key
        self._id_factory = id_factory

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> list[Task]:
        try:
            raw = await self._storage.get_item(self._key)
            if not raw:
                return []
            data = json.loads(raw)
        except Exception:
            logger.exception("TaskStore load failed key=%s", self._key)
            return []

        if data is None:
            return []
        if not isinstance(data, list):
            logger.error(
                "TaskStore load: key=%s holds %s, expected a JSON array; ignoring.",
                self._key,
                type(data).__name__,
            )
            return []

        records, changed = migrate_task_records(data, self._id_factory)
        if changed:
            logger.info("TaskStore migration: writing back %d repaired records", len(records))
            await self._write(records)

        return [Task.from_dict(r) for r in records]

    async def save(self, tasks: Sequence[Task]) -> None:
        await self._write([t.to_dict() for t in tasks])

    async def clear(self) -> None:
        try:
            await self._storage.remove_item(self._key)
            logger.debug("TaskStore cleared key=%s", self._key)
        except Exception:
            logger.exception("TaskStore clear failed key=%s", self._key)

    async def _write(self, records: list[dict[str, Any]]) -> None:
        try:
            payload = json.dumps(records, ensure_ascii=False)
            await self._storage.set_item(self._key, payload)
            logger.debug("TaskStore saved %d tasks key=%s", len(records), self._key)
        except Exception:
            logger.exception("TaskStore save failed key=%s", self._key)
