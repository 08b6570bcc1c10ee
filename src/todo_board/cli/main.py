# src/todo_board/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console view on one
asyncio event loop until /exit.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(state: AppState) -> None:
    try:
        await run_console_loop(state)
    finally:
        try:
            await state.remote.aclose()
        except Exception:
            logger.debug("Remote close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_file = setup_logging(log_dir=getattr(settings, "data_dir", ".local/todo"), console_level=console_level)

    logger.info("Starting %s (backend=%s, log=%s)...", settings.app_name, settings.backend, log_file)

    state = create_initial_state(settings=settings)
    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
