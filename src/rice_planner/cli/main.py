# src/rice_planner/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, optionally logs in the configured
user, then runs the console REPL in the main thread while backend calls run
on the background event loop.
"""

from __future__ import annotations

import logging
import shlex

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..cli.commands import registry as command_registry
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/rice_planner")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "rice-planner"))

    state = create_initial_state(settings=settings)

    try:
        if settings.default_username:
            reply = command_registry.handle(state, f"/login {shlex.quote(settings.default_username)}")
            if reply:
                print(reply)
        run_console_loop(state)
    finally:
        shutdown_state(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
