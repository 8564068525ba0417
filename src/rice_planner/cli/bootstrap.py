# src/rice_planner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the task store, scoring backend(s), sync coordinator and the
  background event loop into AppState.
"""

from __future__ import annotations

import contextlib
import logging

from ..backend.http_client import HttpScoringBackend
from ..backend.offline import LocalScoringBackend
from ..config import get_settings
from ..core.loop_runner import BackgroundLoop
from ..core.ports import ScoringBackend
from ..core.state import AppState
from ..planning.sync import SyncCoordinator
from ..planning.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_backend(settings) -> tuple[ScoringBackend, ScoringBackend | None]:
    """
    Pick the primary backend and the optional degraded-mode fallback.

    No backend URL -> offline demo mode (local scoring only, no fallback needed).
    """
    base_url = str(getattr(settings, "backend_base_url", "") or "")
    if not base_url:
        logger.info("No backend URL configured; running in offline mode (local scoring).")
        return LocalScoringBackend(), None

    backend = HttpScoringBackend(
        base_url,
        timeout_seconds=float(getattr(settings, "request_timeout_seconds", 30.0)),
    )
    fallback = LocalScoringBackend() if getattr(settings, "local_fallback", False) else None
    logger.info("Backend: %s (local fallback: %s)", base_url, fallback is not None)
    return backend, fallback


def create_initial_state(*, settings=None, backend: ScoringBackend | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the backend) injectable makes the app easier to test
    and avoids hidden global config reads. If settings is None, falls back to
    get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    fallback: ScoringBackend | None = None
    if backend is None:
        backend, fallback = create_backend(settings)

    store = TaskStore()
    runner = BackgroundLoop().start()

    return AppState(
        settings=settings,
        store=store,
        backend=backend,
        coordinator=SyncCoordinator(store, backend, fallback=fallback),
        runner=runner,
        sprint_capacity=float(getattr(settings, "sprint_capacity", 40.0)),
        username=None,
    )


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.runner.run(state.coordinator.drain(), timeout=10.0)
    except Exception:
        logger.exception("Failed to wait for pending remote deletes.")

    if state.coordinator.unresolved_deletes:
        logger.warning(
            "Exiting with %d unresolved remote deletes: %s",
            len(state.coordinator.unresolved_deletes),
            sorted(state.coordinator.unresolved_deletes),
        )

    with contextlib.suppress(Exception):
        state.runner.run(state.backend.aclose(), timeout=5.0)

    state.runner.stop()
