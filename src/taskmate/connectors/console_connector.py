# src/taskmate/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.ports import ConfirmOption
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def _ask(prompt: str) -> str:
    # input() blocks; keep the event loop free while waiting for the user.
    return await asyncio.to_thread(input, prompt)


async def console_confirm(title: str, message: str, options: Sequence[ConfirmOption]) -> None:
    """
    Confirm port for the console: y/N prompt.

    "y" runs the last option (the affirmative one); anything else dismisses.
    """
    if not options:
        return
    affirmative = options[-1]
    try:
        answer = await _ask(f"{title}: {message} [{affirmative.text}? y/N] ")
    except (EOFError, KeyboardInterrupt):
        print()
        return
    if answer.strip().lower() in ("y", "yes") and affirmative.on_press is not None:
        await affirmative.on_press()


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = (await _ask(">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is a shortcut for /add.
            user_input = f"/add {user_input}"

        try:
            reply = await command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            print(f"[{_ts_local()}] {reply}")

    logger.info("Console connector finished.")
