# tests/test_commands.py

from __future__ import annotations

import pytest

from taskmate.cli.bootstrap import create_initial_state
from taskmate.cli.commands import CommandRegistry, registry
from taskmate.core.state import AppState
from taskmate.tasks.task_models import TaskStatus

from .fakes import SequentialIds


@pytest.mark.asyncio
async def test_command_registry_routes_and_aliases(state: AppState) -> None:
    reg = CommandRegistry()
    called: list[list[str]] = []

    async def h(state, args):
        called.append(args)
        return "ok"

    reg.register("a", h, "a", aliases=["alpha"])

    assert await reg.handle(state, "/a x y") == "ok"
    assert await reg.handle(state, "/ALPHA") == "ok"
    assert called == [["x", "y"], []]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_add_list_done_flow(state: AppState) -> None:
    reply = await registry.handle(state, "/add Write report --cat Work --prio High --due 2030-01-01")
    assert reply == "Task added: id-1 Write report"

    listing = await registry.handle(state, "/list") or ""
    assert "== Work" in listing
    assert "Write report" in listing
    assert "Done: 0 / 1" in listing

    assert await registry.handle(state, "/done id-1") == "Write report: done"
    assert state.tasks[0].status is TaskStatus.DONE


@pytest.mark.asyncio
async def test_validation_failures_are_shown_not_raised(state: AppState) -> None:
    assert await registry.handle(state, "/add --prio High") == "Task title must not be empty."

    await registry.handle(state, "/cat-add Mobile")
    assert await registry.handle(state, "/cat-add MOBILE") == "Category already exists."


@pytest.mark.asyncio
async def test_clear_done_reports_nothing_to_delete(state: AppState) -> None:
    await registry.handle(state, "/add a")

    reply = await registry.handle(state, "/clear-done")

    assert reply == "There are no completed tasks to delete."
    assert len(await state.task_store.load()) == 1


@pytest.mark.asyncio
async def test_filter_command(state: AppState) -> None:
    assert await registry.handle(state, "/filter status done") == "Filter status = done"
    assert state.status_filter == "done"
    assert "must be one of" in (await registry.handle(state, "/filter priority Urgent") or "")

    await registry.handle(state, "/filter reset")
    assert (state.status_filter, state.category_filter, state.priority_filter) == ("all", "all", "all")


@pytest.mark.asyncio
async def test_bootstrap_wires_configured_backend(settings) -> None:
    settings.storage_backend = "sqlite"
    state = create_initial_state(settings=settings, id_factory=SequentialIds("boot"))

    await registry.handle(state, "/add persisted")
    again = create_initial_state(settings=settings)

    assert [t.id for t in await again.task_store.load()] == ["boot-1"]
