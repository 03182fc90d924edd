# src/taskmate/view/pipeline.py

"""
View pipeline: raw tasks -> filtered -> sorted -> grouped by category.

Pure and synchronous. Inputs are never mutated; every stage returns new lists.
Defaults for optional task fields are applied in one place (resolve_defaults).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date
from enum import StrEnum

from ..tasks.task_models import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    Category,
    Task,
    color_of,
    priority_weight,
)

ALL = "all"


class StatusFilter(StrEnum):
    ALL = "all"
    TODO = "todo"  # anything not done
    DONE = "done"


@dataclass(slots=True, frozen=True)
class Section:
    key: str
    color: str
    tasks: tuple[Task, ...]


@dataclass(slots=True, frozen=True)
class TaskView:
    sections: tuple[Section, ...]
    done_count: int
    total_count: int
    overdue_count: int

    @property
    def tasks(self) -> list[Task]:
        """Sections flattened back into display order."""
        return [t for s in self.sections for t in s.tasks]


def resolve_defaults(task: Task) -> Task:
    """Copy of task with empty category/priority replaced by their defaults."""
    category = task.category or DEFAULT_CATEGORY
    priority = task.priority or DEFAULT_PRIORITY.value
    if category == task.category and priority == task.priority:
        return task
    return replace(task, category=category, priority=priority)


def parse_deadline(raw: str | None) -> date | None:
    """YYYY-MM-DD -> date; missing or unparseable deadlines give None."""
    if not raw:
        return None
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError:
        return None


def is_overdue(task: Task, today: date) -> bool:
    due = parse_deadline(task.deadline)
    return due is not None and due < today and not task.is_done


def deadline_label(task: Task, today: date) -> str | None:
    """Short countdown text for a task card ("Overdue" / "3 days left")."""
    due = parse_deadline(task.deadline)
    if due is None:
        return None
    diff = (due - today).days
    if diff < 0:
        return "Overdue"
    if diff == 1:
        return "1 day left"
    return f"{diff} days left"


def _matches_status(task: Task, status_filter: str) -> bool:
    if status_filter == StatusFilter.ALL:
        return True
    if status_filter == StatusFilter.TODO:
        return not task.is_done
    if status_filter == StatusFilter.DONE:
        return task.is_done
    raise ValueError(f"unknown status filter: {status_filter!r}")


def filter_tasks(
    tasks: Sequence[Task],
    status_filter: str = ALL,
    category_filter: str = ALL,
    priority_filter: str = ALL,
) -> list[Task]:
    """Keep tasks passing all three filters. Expects tasks with defaults resolved."""
    return [
        t
        for t in tasks
        if _matches_status(t, status_filter)
        and (category_filter == ALL or t.category == category_filter)
        and (priority_filter == ALL or t.priority == priority_filter)
    ]


def _sort_key(task: Task) -> tuple[int, bool, date]:
    due = parse_deadline(task.deadline)
    # (higher priority first, dated before undated, earlier date first)
    return (-priority_weight(task.priority), due is None, due or date.max)


def sort_tasks(tasks: Sequence[Task]) -> list[Task]:
    """Priority desc, then deadline asc with undated tasks last. Stable for ties."""
    return sorted(tasks, key=_sort_key)


def group_tasks(tasks: Sequence[Task]) -> list[tuple[str, list[Task]]]:
    """
    Partition by category, keeping task order inside each group and ordering
    groups by the first time their category shows up in `tasks`.
    """
    keys: list[str] = []
    groups: dict[str, list[Task]] = {}
    for t in tasks:
        key = t.category or DEFAULT_CATEGORY
        if key not in groups:
            keys.append(key)
            groups[key] = []
        groups[key].append(t)
    return [(k, groups[k]) for k in keys]


def derive(
    tasks: Sequence[Task],
    categories: Sequence[Category],
    status_filter: str = ALL,
    category_filter: str = ALL,
    priority_filter: str = ALL,
    *,
    today: date | None = None,
) -> TaskView:
    """
    Build the sectioned display structure.

    Counters (done/total/overdue) are computed over the whole collection,
    not the filtered subset.
    """
    if today is None:
        today = date.today()

    resolved = [resolve_defaults(t) for t in tasks]
    visible = sort_tasks(filter_tasks(resolved, status_filter, category_filter, priority_filter))
    sections = tuple(
        Section(key=key, color=color_of(key, categories), tasks=tuple(group))
        for key, group in group_tasks(visible)
    )

    return TaskView(
        sections=sections,
        done_count=sum(1 for t in resolved if t.is_done),
        total_count=len(resolved),
        overdue_count=sum(1 for t in resolved if is_overdue(t, today)),
    )
