# src/rice_planner/backend/offline.py

from __future__ import annotations

import logging
from dataclasses import replace

from ..planning.scoring import score_task
from ..planning.task_models import Task

logger = logging.getLogger(__name__)


class LocalScoringBackend:
    """
    Local deterministic scorer used when the remote service is not available.

    Behavior:
    - calculate -> same formula as the server, id and synced flag kept as-is
    - fetch_tasks -> nothing is persisted locally, so always []
    - delete -> no-op

    Used as the degraded-mode fallback for analyze, and as the only backend
    in offline demo mode (no backend URL configured).
    """

    async def fetch_tasks(self, username: str) -> list[Task]:
        logger.debug("Local backend: no stored tasks for user=%s", username)
        return []

    async def calculate(self, task: Task, username: str) -> Task:
        return replace(task, score=score_task(task))

    async def delete(self, task_id: int) -> None:
        return

    async def aclose(self) -> None:
        return
