# src/taskmate/tasks/category_store.py

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from ..core.ports import KeyValueStorage
from .task_models import Category

logger = logging.getLogger(__name__)

CATEGORIES_KEY = "TASKMATE_CATEGORIES"


class CategoryStore:
    """Ordered category list persisted as one JSON array. Same fail-soft rules as TaskStore."""

    def __init__(self, storage: KeyValueStorage, *, key: str = CATEGORIES_KEY) -> None:
        self._storage = storage
        self._key = key

    async def load(self) -> list[Category]:
        try:
            raw = await self._storage.get_item(self._key)
            if not raw:
                return []
            data = json.loads(raw)
        except Exception:
            logger.exception("CategoryStore load failed key=%s", self._key)
            return []

        if not isinstance(data, list):
            return []
        return [Category.from_dict(c) for c in data if isinstance(c, dict)]

    async def save(self, categories: Sequence[Category]) -> None:
        try:
            payload = json.dumps([c.to_dict() for c in categories], ensure_ascii=False)
            await self._storage.set_item(self._key, payload)
            logger.debug("CategoryStore saved %d categories", len(categories))
        except Exception:
            logger.exception("CategoryStore save failed key=%s", self._key)
