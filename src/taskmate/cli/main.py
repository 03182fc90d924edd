# src/taskmate/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the stored collections and runs
the console REPL.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import console_confirm, run_console_loop
from ..logging_setup import setup_logging_from_settings
from ..tasks import task_api

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(settings=settings, confirm=console_confirm)
    await task_api.refresh(state)
    logger.info(
        "Loaded %d tasks and %d categories (backend=%s).",
        len(state.tasks),
        len(state.categories),
        settings.storage_backend,
    )

    if settings.console_enabled:
        await run_console_loop(state)
    else:
        view = state.view()
        logger.info(
            "Console disabled. done=%d total=%d overdue=%d",
            view.done_count,
            view.total_count,
            view.overdue_count,
        )


def main() -> None:
    settings = get_settings()
    log_file = setup_logging_from_settings(settings)
    logger.debug("Logging to %s", log_file)

    logger.info("Starting %s...", settings.app_name)
    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
