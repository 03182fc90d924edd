# src/taskmate/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the storage backend, stores and UI callbacks into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import Confirm, IdFactory, auto_confirm, new_id
from ..core.state import AppState
from ..storage.kv import build_storage
from ..tasks.category_store import CategoryStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if settings.storage_backend == "sqlite":
        settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    confirm: Confirm | None = None,
    id_factory: IdFactory | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    The snapshot starts empty; call tasks.task_api.refresh() to load it.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    id_factory = id_factory or new_id
    storage = build_storage(settings)

    state = AppState(
        settings=settings,
        task_store=TaskStore(storage, key=settings.tasks_key, id_factory=id_factory),
        category_store=CategoryStore(storage, key=settings.categories_key),
        id_factory=id_factory,
        confirm=confirm or auto_confirm,
    )
    logger.debug(
        "AppState created backend=%s tasks_key=%s categories_key=%s",
        settings.storage_backend,
        settings.tasks_key,
        settings.categories_key,
    )
    return state
