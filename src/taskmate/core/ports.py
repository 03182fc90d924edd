# src/taskmate/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends and UI collaborators (confirmation dialogs)
swappable and makes testing easier.
"""

import uuid
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

IdFactory = Callable[[], str]
# Produces globally unique, non-empty strings.

ConfirmHandler = Callable[[], Awaitable[None]]


def new_id() -> str:
    """Default IdFactory: random UUID4 as a string."""
    return str(uuid.uuid4())


class KeyValueStorage(Protocol):
    """
    Async key-value slots holding serialized (JSON) text.

    Backends raise PersistenceFailure on storage errors.
    """

    async def get_item(self, key: str) -> str | None: ...
    async def set_item(self, key: str, value: str) -> None: ...
    async def remove_item(self, key: str) -> None: ...


class TaskRepo(Protocol):
    async def load(self) -> list[Any]: ...
    async def save(self, tasks: Sequence[Any]) -> None: ...
    async def clear(self) -> None: ...


class CategoryRepo(Protocol):
    async def load(self) -> list[Any]: ...
    async def save(self, categories: Sequence[Any]) -> None: ...


@dataclass(slots=True, frozen=True)
class ConfirmOption:
    """
    One button of a confirmation dialog.

    on_press is None for purely dismissive options ("Cancel").
    style is a hint for the UI ("cancel", "destructive", "default").
    """

    text: str
    on_press: ConfirmHandler | None = None
    style: str = "default"


class Confirm(Protocol):
    """
    UI-side port: ask the user before a destructive operation.

    Implementations invoke exactly one option's on_press, or none if the dialog
    was dismissed. The core never renders the dialog itself.
    """

    def __call__(
            self,
            title: str,
            message: str,
            options: Sequence[ConfirmOption],
    ) -> Awaitable[None]: ...


async def auto_confirm(title: str, message: str, options: Sequence[ConfirmOption]) -> None:
    """Non-interactive confirm: always picks the last (affirmative) option."""
    if not options:
        return
    handler = options[-1].on_press
    if handler is not None:
        await handler()


async def auto_cancel(title: str, message: str, options: Sequence[ConfirmOption]) -> None:
    """Non-interactive confirm that dismisses every dialog."""
    return
