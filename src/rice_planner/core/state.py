# src/rice_planner/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..planning.sync import SyncCoordinator
from ..planning.task_store import TaskStore
from .loop_runner import BackgroundLoop
from .ports import ScoringBackend


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules.
    settings: object

    store: TaskStore
    backend: ScoringBackend
    coordinator: SyncCoordinator
    runner: BackgroundLoop

    sprint_capacity: float
    username: str | None = None
