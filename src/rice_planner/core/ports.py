# src/rice_planner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The planning core depends on a Protocol instead of a concrete HTTP client.
This keeps the remote scorer swappable (HTTP, local formula, test fakes).
"""

from typing import Protocol

from ..planning.task_models import Task


class ScoringBackend(Protocol):
    """
    Remote scoring/persistence collaborator.

    Implementations raise BackendError on any failure; callers never see
    transport-specific exceptions.
    """

    async def fetch_tasks(self, username: str) -> list[Task]: ...

    async def calculate(self, task: Task, username: str) -> Task:
        """Score (and persist) one task; returns the authoritative version."""
        ...

    async def delete(self, task_id: int) -> None: ...

    async def aclose(self) -> None: ...
