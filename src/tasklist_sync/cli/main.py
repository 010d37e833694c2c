# src/tasklist_sync/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, runs one command, then closes the client.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..cli.commands import registry
from ..config import Settings, get_settings
from ..core.errors import HttpError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def run(argv: list[str], *, settings: Settings | None = None, transport=None) -> str:
    state = await create_initial_state(settings=settings, transport=transport)
    try:
        return await registry.handle(state, argv)
    finally:
        await state.client.aclose()


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    argv = sys.argv[1:] if argv is None else argv

    # choose console log level from settings.log_level
    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.debug("Starting %s: %s", settings.app_name, argv[:1])

    try:
        output = asyncio.run(run(argv, settings=settings))
    except HttpError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error {e.status}: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        return 130

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
