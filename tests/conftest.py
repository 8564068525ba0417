# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from rice_planner.cli.bootstrap import create_initial_state, shutdown_state
from rice_planner.core.state import AppState
from rice_planner.planning.task_store import TaskStore

from .fakes import FakeScoringBackend


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="rice-planner-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        backend_base_url="http://scorer.test",
        request_timeout_seconds=5.0,
        local_fallback=False,
        default_username=None,
        sprint_capacity=40.0,
    )


@pytest.fixture()
def backend() -> FakeScoringBackend:
    return FakeScoringBackend()


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture()
def state(settings: SimpleNamespace, backend: FakeScoringBackend) -> Iterator[AppState]:
    """
    AppState wired with the fake backend and a real background loop.

    NOTE: the loop thread is real because command handlers block on it,
    exactly like the console does.
    """
    app_state = create_initial_state(settings=settings, backend=backend)
    try:
        yield app_state
    finally:
        shutdown_state(app_state)
