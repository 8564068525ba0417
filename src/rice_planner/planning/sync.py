# src/rice_planner/planning/sync.py

from __future__ import annotations

"""
Synchronization between the optimistic local pool and the authoritative scorer.

analyze():
- snapshot the pool,
- fan out one scoring request per task (asyncio.TaskGroup),
- join; if any child failed nothing is committed,
- otherwise replace the whole pool in one swap.

delete():
- remove locally right away,
- fire the remote delete in the background; failures are logged and
  remembered in `unresolved_deletes`, never rolled back.
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import cast

from ..core.ports import ScoringBackend
from .errors import BackendError, StateError, ValidationError
from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class SyncCoordinator:
    def __init__(
        self,
        store: TaskStore,
        backend: ScoringBackend,
        *,
        fallback: ScoringBackend | None = None,
    ) -> None:
        self._store = store
        self._backend = backend
        self._fallback = fallback
        self._background: set[asyncio.Task[None]] = set()
        self.unresolved_deletes: set[int] = set()

    @property
    def store(self) -> TaskStore:
        return self._store

    # ---- analyze / commit ----

    async def analyze(self, username: str | None) -> list[Task]:
        """
        Score every pooled task remotely and commit the authoritative set.

        All-or-nothing: on any failure the pool stays exactly as it was.
        If every failure was a transport failure and a fallback backend is
        configured, the batch is scored by the fallback instead.
        """
        snapshot = self._store.pool()
        if not snapshot:
            raise StateError("empty list")
        if not username:
            raise StateError("unauthenticated")

        logger.info("Analyze: scoring %d tasks for user=%s", len(snapshot), username)

        try:
            scored = await self._score_all(self._backend, snapshot, username)
        except BackendError as e:
            if self._fallback is None or not e.unreachable:
                logger.info("Analyze aborted, pool unchanged: %s", e)
                raise
            logger.warning("Scorer unreachable (%s); scoring locally.", e)
            scored = await self._score_all(self._fallback, snapshot, username)

        self._commit(scored)
        ranked = self._store.ranked()
        logger.info(
            "Analyze committed %d tasks (top=%r score=%.1f)",
            len(ranked),
            ranked[0].name,
            ranked[0].score,
        )
        return ranked

    async def _score_all(
        self,
        backend: ScoringBackend,
        snapshot: Sequence[Task],
        username: str,
    ) -> list[Task]:
        try:
            async with asyncio.TaskGroup() as tg:
                children = [tg.create_task(backend.calculate(task, username)) for task in snapshot]
        except ExceptionGroup as group:
            failures = group.exceptions
            if not all(isinstance(exc, BackendError) for exc in failures):
                raise
            first = cast(BackendError, failures[0])
            unreachable = all(cast(BackendError, exc).unreachable for exc in failures)
            raise BackendError(
                f"{len(failures)} of {len(snapshot)} scoring requests failed: {first}",
                status_code=first.status_code,
                unreachable=unreachable,
            ) from first

        return [child.result() for child in children]

    def _commit(self, tasks: list[Task]) -> None:
        try:
            self._store.replace_all(tasks)
        except ValidationError as e:
            raise BackendError(f"Scorer returned an inconsistent task set: {e}") from e

    # ---- load ----

    async def load(self, username: str | None) -> list[Task]:
        """Replace the pool with the user's authoritative tasks from the backend."""
        if not username:
            raise StateError("unauthenticated")

        tasks = await self._backend.fetch_tasks(username)
        self._commit(tasks)
        logger.info("Loaded %d tasks for user=%s", len(tasks), username)
        return self._store.ranked()

    # ---- optimistic delete ----

    async def delete(self, task_id: int) -> Task | None:
        """
        Remove locally, then fire the remote delete without awaiting it.

        Only backend-confirmed tasks have anything to delete remotely.
        """
        removed = self._store.remove(task_id)
        if removed is None:
            logger.debug("Delete: id=%s not in pool", task_id)
            return None

        if removed.synced:
            bg = asyncio.create_task(self._remote_delete(removed.id))
            self._background.add(bg)
            bg.add_done_callback(self._background.discard)
        return removed

    async def _remote_delete(self, task_id: int) -> None:
        try:
            await self._backend.delete(task_id)
        except BackendError as e:
            self.unresolved_deletes.add(task_id)
            logger.warning("Remote delete failed id=%s (%s); local and remote pools differ.", task_id, e)
            return
        except Exception:
            self.unresolved_deletes.add(task_id)
            logger.exception("Remote delete crashed id=%s; local and remote pools differ.", task_id)
            return
        self.unresolved_deletes.discard(task_id)
        logger.debug("Remote delete ok id=%s", task_id)

    async def retry_unresolved_deletes(self) -> int:
        """Retry every recorded failed delete; returns how many are still unresolved."""
        pending = sorted(self.unresolved_deletes)
        for task_id in pending:
            await self._remote_delete(task_id)
        return len(self.unresolved_deletes)

    async def drain(self) -> None:
        """Wait for in-flight background deletes."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
