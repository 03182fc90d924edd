# src/taskmate/core/state.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date

from ..tasks.task_models import Category, Task
from ..view.pipeline import ALL, TaskView, derive
from .ports import CategoryRepo, Confirm, IdFactory, TaskRepo, auto_confirm, new_id


@dataclass
class AppState:
    """
    One user session: the stores, the in-memory snapshot they were last read
    into, and the current filter selections.

    Lifecycle operations (tasks.task_api) take the session lock, so their
    load/transform/save sequences never interleave within a session.
    """

    # Settings object (Settings or any object with the same attributes).
    settings: object

    task_store: TaskRepo
    category_store: CategoryRepo

    id_factory: IdFactory = new_id
    confirm: Confirm = auto_confirm

    tasks: list[Task] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)

    status_filter: str = ALL
    category_filter: str = ALL
    priority_filter: str = ALL

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def view(self, *, today: date | None = None) -> TaskView:
        return derive(
            self.tasks,
            self.categories,
            self.status_filter,
            self.category_filter,
            self.priority_filter,
            today=today,
        )
