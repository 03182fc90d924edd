# src/taskmate/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import date

from ..core.state import AppState
from ..errors import ValidationFailure
from ..tasks import task_api
from ..tasks.task_models import Priority, clamp_progress
from ..view.pipeline import ALL, StatusFilter, TaskView, deadline_label

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)

SHORT_ID = 8


class CommandRegistry:
    """Simple slash-command registry used by the console front end (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return await handler(state, args)
        except ValidationFailure as e:
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _resolve_task_id(state: AppState, ref: str) -> str | None:
    """Accept a full id or a unique prefix of one (as shown by /list)."""
    ids = [t.id for t in state.tasks]
    if ref in ids:
        return ref
    matches = [i for i in ids if i.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


def _pop_option(args: list[str], flag: str) -> str | None:
    """Remove `flag value` from args (in place) and return value."""
    if flag not in args:
        return None
    i = args.index(flag)
    if i + 1 >= len(args):
        del args[i]
        return None
    value = args[i + 1]
    del args[i : i + 2]
    return value


def render_view(view: TaskView, *, today: date) -> str:
    if not view.sections:
        return "No tasks match the current filters."

    lines: list[str] = []
    for section in view.sections:
        lines.append(f"== {section.key} ({section.color})")
        for t in section.tasks:
            mark = "x" if t.is_done else " "
            extras = [t.priority or Priority.LOW.value]
            if t.deadline:
                extras.append(f"due {t.deadline}")
                label = deadline_label(t, today)
                if label and not t.is_done:
                    extras.append(label)
            pct = clamp_progress(t.progress)
            if pct is not None:
                extras.append(f"{pct:.0f}%")
            lines.append(f"  [{mark}] {t.id[:SHORT_ID]}  {t.title}  ({', '.join(extras)})")
    return "\n".join(lines)


def _render_stats(view: TaskView) -> str:
    return f"Done: {view.done_count} / {view.total_count}   Overdue: {view.overdue_count}"


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str]) -> str:
    await task_api.refresh(state)
    today = date.today()
    view = state.view(today=today)
    return f"{render_view(view, today=today)}\n{_render_stats(view)}"


async def cmd_stats(state: AppState, args: list[str]) -> str:
    return _render_stats(state.view())


async def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title...> [--cat <category>] [--due YYYY-MM-DD] [--prio Low|Medium|High]
    """
    args = list(args)
    category = _pop_option(args, "--cat")
    deadline = _pop_option(args, "--due")
    priority = _pop_option(args, "--prio")
    task = await task_api.create_task(
        state,
        title=" ".join(args),
        category=category,
        deadline=deadline,
        priority=priority,
    )
    return f"Task added: {task.id[:SHORT_ID]} {task.title}"


async def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task_id = _resolve_task_id(state, args[0])
    if task_id is None:
        return f"No task matches {args[0]!r}."
    task = await task_api.toggle_task(state, task_id)
    if task is None:
        return f"No task matches {args[0]!r}."
    return f"{task.title}: {task.status.value}"


async def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    task_id = _resolve_task_id(state, args[0])
    if task_id is None:
        return f"No task matches {args[0]!r}."
    result = await task_api.delete_task(state, task_id)
    return result.message


async def cmd_clear_done(state: AppState, args: list[str]) -> str:
    result = await task_api.delete_completed(state)
    return result.message


async def cmd_clear_all(state: AppState, args: list[str]) -> str:
    result = await task_api.delete_all(state)
    return result.message


async def cmd_cat(state: AppState, args: list[str]) -> str:
    if not state.categories:
        return "No categories yet. Use /cat-add <name> [color]."
    return "\n".join(f"  {c.key} ({c.color})" for c in state.categories)


async def cmd_cat_add(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /cat-add <name> [color]"
    color = args[1] if len(args) > 1 else None
    category = await task_api.add_category(state, args[0], color)
    state.category_filter = category.key
    return f"Category added: {category.key} ({category.color})"


async def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter                         -> show current filters
    /filter status all|todo|done
    /filter category all|<name>
    /filter priority all|Low|Medium|High
    /filter reset
    """
    if not args:
        return (
            f"Filters: status={state.status_filter} "
            f"category={state.category_filter} priority={state.priority_filter}"
        )

    sub = args[0].lower()
    if sub == "reset":
        state.status_filter = state.category_filter = state.priority_filter = ALL
        return "Filters reset."

    if len(args) < 2:
        return "Usage: /filter status|category|priority <value>"
    value = " ".join(args[1:])

    if sub == "status":
        if value not in {s.value for s in StatusFilter}:
            return "Status filter must be one of: all, todo, done."
        state.status_filter = value
    elif sub == "category":
        state.category_filter = value
    elif sub == "priority":
        if value != ALL and value not in {p.value for p in Priority}:
            return "Priority filter must be one of: all, Low, Medium, High."
        state.priority_filter = value
    else:
        return "Usage: /filter status|category|priority <value>"

    return f"Filter {sub} = {value}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks grouped by category.", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Show done/total/overdue counters.")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <title> [--cat C] [--due YYYY-MM-DD] [--prio Low|Medium|High].",
)
registry.register("done", cmd_done, help_text="Toggle a task done/pending: /done <id>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.")
registry.register("clear-done", cmd_clear_done, help_text="Delete all completed tasks.")
registry.register("clear-all", cmd_clear_all, help_text="Delete all tasks.")
registry.register("cat", cmd_cat, help_text="List categories.")
registry.register("cat-add", cmd_cat_add, help_text="Add a category: /cat-add <name> [color].")
registry.register(
    "filter", cmd_filter, help_text="Show/set filters: /filter status|category|priority <value>."
)
