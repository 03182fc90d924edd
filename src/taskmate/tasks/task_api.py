# src/taskmate/tasks/task_api.py

"""
Task lifecycle operations.

Each operation is a full read-modify-write: load the stored collection, compute
the new one in memory, save it, then refresh the session snapshot
(state.tasks / state.categories).

Writes are serialized by state.lock. Code that talks to TaskStore directly,
outside these helpers, can still lose updates when two load/save pairs overlap.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from ..core.ports import ConfirmOption
from ..core.state import AppState
from ..errors import ValidationFailure
from .task_models import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    Category,
    Priority,
    Task,
    TaskStatus,
    find_category,
    pick_color,
)

logger = logging.getLogger(__name__)

_DEADLINE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MSG_EMPTY_TITLE = "Task title must not be empty."
MSG_CATEGORY_EXISTS = "Category already exists."
MSG_EMPTY_CATEGORY = "Category name must not be empty."
MSG_NOTHING_DONE = "There are no completed tasks to delete."
MSG_LIST_EMPTY = "The task list is already empty."
MSG_NOT_FOUND = "Task not found."
MSG_CANCELLED = "Cancelled."


class DeleteOutcome(StrEnum):
    DELETED = "deleted"
    NOTHING_TO_DELETE = "nothing_to_delete"
    EMPTY = "empty"
    CANCELLED = "cancelled"
    NOT_FOUND = "not_found"


@dataclass(slots=True)
class DeleteResult:
    outcome: DeleteOutcome
    removed: int = 0
    message: str = ""

    @property
    def deleted(self) -> bool:
        return self.outcome is DeleteOutcome.DELETED


async def refresh(state: AppState) -> None:
    """Reload both collections into the session snapshot."""
    state.tasks = await state.task_store.load()
    state.categories = await state.category_store.load()


def _clean_deadline(deadline: str | None) -> str | None:
    if deadline is None or not deadline.strip():
        return None
    deadline = deadline.strip()
    if not _DEADLINE_RE.match(deadline):
        raise ValidationFailure(f"Deadline must look like YYYY-MM-DD, got {deadline!r}.")
    try:
        date.fromisoformat(deadline)
    except ValueError as e:
        raise ValidationFailure(f"Deadline {deadline!r} is not a calendar date.") from e
    return deadline


def _clean_priority(priority: str | None) -> str:
    if priority is None or not priority.strip():
        return DEFAULT_PRIORITY.value
    priority = priority.strip()
    try:
        return Priority(priority).value
    except ValueError as e:
        allowed = ", ".join(p.value for p in Priority)
        raise ValidationFailure(f"Priority must be one of: {allowed}.") from e


async def create_task(
    state: AppState,
    *,
    title: str,
    description: str = "",
    category: str | None = None,
    deadline: str | None = None,
    priority: str | None = None,
    progress: float | None = None,
) -> Task:
    """
    Append a new pending task. Raises ValidationFailure before touching storage.

    The title is stored as given; only its trimmed form is checked for emptiness.
    """
    if not (title or "").strip():
        raise ValidationFailure(MSG_EMPTY_TITLE)

    task = Task(
        id=state.id_factory(),
        title=title,
        description=description or "",
        category=(category or "").strip() or DEFAULT_CATEGORY,
        deadline=_clean_deadline(deadline),
        priority=_clean_priority(priority),
        status=TaskStatus.PENDING,
        progress=progress,
    )

    async with state.lock:
        tasks = await state.task_store.load()
        updated = [*tasks, task]
        await state.task_store.save(updated)
        state.tasks = updated

    logger.info("Task created id=%s category=%s priority=%s", task.id, task.category, task.priority)
    return task


async def toggle_task(state: AppState, task_id: str) -> Task | None:
    """Flip pending <-> done for one task. Returns the updated task, or None if unknown."""
    async with state.lock:
        tasks = await state.task_store.load()
        toggled: Task | None = None
        updated: list[Task] = []
        for t in tasks:
            if t.id == task_id:
                t = t.with_status(t.status.toggled())
                toggled = t
            updated.append(t)

        if toggled is None:
            logger.debug("Toggle ignored: no task id=%s", task_id)
            state.tasks = tasks
            return None

        await state.task_store.save(updated)
        state.tasks = updated

    logger.debug("Task toggled id=%s status=%s", task_id, toggled.status.value)
    return toggled


async def delete_task(state: AppState, task_id: str) -> DeleteResult:
    """Remove one task after confirmation."""
    result = DeleteResult(DeleteOutcome.CANCELLED, message=MSG_CANCELLED)

    async def _delete() -> None:
        nonlocal result
        async with state.lock:
            tasks = await state.task_store.load()
            kept = [t for t in tasks if t.id != task_id]
            if len(kept) == len(tasks):
                state.tasks = tasks
                result = DeleteResult(DeleteOutcome.NOT_FOUND, message=MSG_NOT_FOUND)
                return
            await state.task_store.save(kept)
            state.tasks = kept
            result = DeleteResult(
                DeleteOutcome.DELETED, removed=len(tasks) - len(kept), message="Task deleted."
            )
        logger.info("Task deleted id=%s", task_id)

    await state.confirm(
        "Confirm",
        "Delete this task?",
        [
            ConfirmOption("Cancel", style="cancel"),
            ConfirmOption("Delete", _delete, style="destructive"),
        ],
    )
    return result


async def delete_completed(state: AppState) -> DeleteResult:
    """Remove every done task after confirmation; no dialog when nothing is done."""
    async with state.lock:
        tasks = await state.task_store.load()
        state.tasks = tasks
    done_count = sum(1 for t in tasks if t.is_done)
    if not done_count:
        return DeleteResult(DeleteOutcome.NOTHING_TO_DELETE, message=MSG_NOTHING_DONE)

    result = DeleteResult(DeleteOutcome.CANCELLED, message=MSG_CANCELLED)

    async def _delete() -> None:
        nonlocal result
        async with state.lock:
            current = await state.task_store.load()
            kept = [t for t in current if not t.is_done]
            removed = len(current) - len(kept)
            if not removed:
                state.tasks = current
                result = DeleteResult(DeleteOutcome.NOTHING_TO_DELETE, message=MSG_NOTHING_DONE)
                return
            await state.task_store.save(kept)
            state.tasks = kept
            result = DeleteResult(
                DeleteOutcome.DELETED, removed=removed, message=f"Deleted {removed} completed tasks."
            )
        logger.info("Deleted %d completed tasks", removed)

    await state.confirm(
        "Delete completed tasks",
        f"Delete {done_count} completed tasks?",
        [
            ConfirmOption("Cancel", style="cancel"),
            ConfirmOption("Delete", _delete, style="destructive"),
        ],
    )
    return result


async def delete_all(state: AppState) -> DeleteResult:
    """Clear the whole collection after confirmation; no dialog when already empty."""
    async with state.lock:
        tasks = await state.task_store.load()
        state.tasks = tasks
    if not tasks:
        return DeleteResult(DeleteOutcome.EMPTY, message=MSG_LIST_EMPTY)

    result = DeleteResult(DeleteOutcome.CANCELLED, message=MSG_CANCELLED)

    async def _clear() -> None:
        nonlocal result
        async with state.lock:
            removed = len(await state.task_store.load())
            await state.task_store.clear()
            state.tasks = []
            result = DeleteResult(
                DeleteOutcome.DELETED, removed=removed, message=f"Deleted {removed} tasks."
            )
        logger.info("Cleared task list (%d tasks)", removed)

    await state.confirm(
        "Confirm",
        "Delete all tasks?",
        [
            ConfirmOption("Cancel", style="cancel"),
            ConfirmOption("Delete", _clear, style="destructive"),
        ],
    )
    return result


async def add_category(state: AppState, key: str, color: str | None = None) -> Category:
    """
    Append a category. Keys are unique ignoring case; without an explicit color
    the next palette color is used (index = current category count).
    """
    clean_key = (key or "").strip()
    if not clean_key:
        raise ValidationFailure(MSG_EMPTY_CATEGORY)

    async with state.lock:
        categories = await state.category_store.load()
        if find_category(clean_key, categories) is not None:
            state.categories = categories
            raise ValidationFailure(MSG_CATEGORY_EXISTS)

        category = Category(key=clean_key, color=(color or "").strip() or pick_color(len(categories)))
        updated = [*categories, category]
        await state.category_store.save(updated)
        state.categories = updated

    logger.info("Category added key=%s color=%s", category.key, category.color)
    return category
