# tests/fakes.py

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field

from taskmate.core.ports import ConfirmOption
from taskmate.errors import PersistenceFailure
from taskmate.storage.kv import MemoryStorage


class SequentialIds:
    """Deterministic IdFactory: id-1, id-2, ..."""

    def __init__(self, prefix: str = "id") -> None:
        self.prefix = prefix
        self.n = 0

    def __call__(self) -> str:
        self.n += 1
        return f"{self.prefix}-{self.n}"


class YieldingStorage(MemoryStorage):
    """
    MemoryStorage that gives up control before every operation.

    Lets two coroutines interleave their load/save pairs the way real I/O would.
    """

    async def get_item(self, key: str) -> str | None:
        await asyncio.sleep(0)
        return await super().get_item(key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        await super().set_item(key, value)


class FailingStorage:
    """Every operation raises PersistenceFailure; calls are recorded."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def get_item(self, key: str) -> str | None:
        self.calls.append(f"get:{key}")
        raise PersistenceFailure("disk on fire")

    async def set_item(self, key: str, value: str) -> None:
        self.calls.append(f"set:{key}")
        raise PersistenceFailure("disk on fire")

    async def remove_item(self, key: str) -> None:
        self.calls.append(f"remove:{key}")
        raise PersistenceFailure("disk on fire")


@dataclass(slots=True)
class ConfirmCall:
    title: str
    message: str
    options: list[str]


@dataclass
class ScriptedConfirm:
    """
    Confirm port for tests.

    choice is the text of the option to press, or None to dismiss the dialog.
    """

    choice: str | None = None
    calls: list[ConfirmCall] = field(default_factory=list)

    async def __call__(self, title: str, message: str, options: Sequence[ConfirmOption]) -> None:
        self.calls.append(ConfirmCall(title, message, [o.text for o in options]))
        if self.choice is None:
            return
        for o in options:
            if o.text == self.choice:
                if o.on_press is not None:
                    await o.on_press()
                return
