# src/rice_planner/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

_NOISY_LIBS = ("httpx", "httpcore")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console shows planner output (add/analyze/plan summaries) and hides
    per-request backend chatter below WARNING. Everything else, captured
    warnings included, reaches the console only at ERROR.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("rice_planner.backend."):
            return record.levelno >= logging.WARNING
        if name.startswith("rice_planner."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/rice_planner",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """Console (filtered) + rice_planner.log (everything). Call once at startup."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    logfile = logging.FileHandler(str(log_dir / "rice_planner.log"), encoding="utf-8")
    logfile.setLevel(file_level)
    logfile.setFormatter(fmt)
    root.addHandler(logfile)

    logging.captureWarnings(True)

    # httpx logs one INFO line per request.
    for lib in _NOISY_LIBS:
        logging.getLogger(lib).setLevel(logging.WARNING)
