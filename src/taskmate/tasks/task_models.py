# src/taskmate/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

DEFAULT_CATEGORY = "Umum"

# Badge colors for new categories, picked by rotation (see pick_color).
COLOR_PALETTE: tuple[str, ...] = (
    "#2563eb",
    "#16a34a",
    "#f59e0b",
    "#ef4444",
    "#8b5cf6",
    "#06b6d4",
    "#84cc16",
    "#e11d48",
)
FALLBACK_COLOR = "#64748b"  # slate, for keys without a stored category


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - the lifecycle only ever produces "pending" and "done"
    - "todo" is a legacy value seen in old records; TaskStore rewrites it to
      "pending" on load, and the view pipeline treats it as not done
    """

    PENDING = "pending"
    DONE = "done"
    TODO = "todo"  # legacy

    @classmethod
    def from_raw(cls, raw: Any) -> TaskStatus:
        """Unknown or missing values resolve to PENDING."""
        if not raw:
            return cls.PENDING
        try:
            return cls(str(raw))
        except ValueError:
            return cls.PENDING

    @property
    def is_done(self) -> bool:
        return self is TaskStatus.DONE

    def toggled(self) -> TaskStatus:
        return TaskStatus.PENDING if self.is_done else TaskStatus.DONE


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def weight(self) -> int:
        return PRIORITY_WEIGHTS[self.value]


PRIORITY_WEIGHTS: dict[str, int] = {
    Priority.LOW.value: 1,
    Priority.MEDIUM.value: 2,
    Priority.HIGH.value: 3,
}

DEFAULT_PRIORITY = Priority.LOW


def priority_weight(name: str | None) -> int:
    """Sort weight of a priority name; unknown names weigh 0 (below Low)."""
    if not name:
        return 0
    return PRIORITY_WEIGHTS.get(name, 0)


def clamp_progress(value: Any) -> float | None:
    """Progress percentage clamped to [0, 100]; non-numbers give None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value != value:  # NaN
        return None
    return float(max(0, min(100, value)))


_TASK_FIELDS = (
    "id",
    "title",
    "description",
    "category",
    "deadline",
    "priority",
    "status",
    "progress",
)


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str = ""

    # Optional fields stay None when absent; defaults are resolved by the view pipeline.
    category: str | None = None
    deadline: str | None = None  # YYYY-MM-DD
    priority: str | None = None

    status: TaskStatus = TaskStatus.PENDING
    progress: float | None = None

    # Keys we do not model are kept so a load/save round trip never drops data.
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_done(self) -> bool:
        return self.status is TaskStatus.DONE

    def with_status(self, status: TaskStatus) -> Task:
        """Copy with a new status; an unrecognized stored status is discarded."""
        extra = {k: v for k, v in self.extra.items() if k != "status"}
        return replace(self, status=status, extra=extra)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Task:
        extra = {k: v for k, v in raw.items() if k not in _TASK_FIELDS}

        # Unrecognized status/progress values go to `extra` untouched and are
        # written back as-is; the typed fields fall back to PENDING / None.
        status = TaskStatus.from_raw(raw.get("status"))
        if "status" in raw and raw["status"] != status.value:
            extra["status"] = raw["status"]

        progress = raw.get("progress")
        if isinstance(progress, bool) or not isinstance(progress, (int, float)):
            if "progress" in raw:
                extra["progress"] = progress
            progress = None

        return cls(
            id=_opt_str(raw.get("id")) or "",
            title=_opt_str(raw.get("title")) or "",
            description=_opt_str(raw.get("description")) or "",
            category=_opt_str(raw.get("category")),
            deadline=_opt_str(raw.get("deadline")),
            priority=_opt_str(raw.get("priority")),
            status=status,
            progress=progress,
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
        }
        if self.category is not None:
            out["category"] = self.category
        if self.deadline is not None:
            out["deadline"] = self.deadline
        if self.priority is not None:
            out["priority"] = self.priority
        out["status"] = self.extra.get("status", self.status.value)
        if self.progress is not None:
            out["progress"] = self.progress
        for k, v in self.extra.items():
            out.setdefault(k, v)
        return out


@dataclass(slots=True, frozen=True)
class Category:
    key: str
    color: str

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Category:
        return cls(
            key=str(raw.get("key") or ""),
            color=str(raw.get("color") or FALLBACK_COLOR),
        )

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "color": self.color}


def pick_color(index: int) -> str:
    """Palette rotation: the n-th category gets COLOR_PALETTE[n % len]."""
    return COLOR_PALETTE[index % len(COLOR_PALETTE)]


def color_of(name: str, categories: Sequence[Category]) -> str:
    for c in categories:
        if c.key == name:
            return c.color
    return FALLBACK_COLOR


def find_category(key: str, categories: Sequence[Category]) -> Category | None:
    """Case-insensitive lookup (category keys are unique ignoring case)."""
    needle = key.lower()
    for c in categories:
        if c.key.lower() == needle:
            return c
    return None
