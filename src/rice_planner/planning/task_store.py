# src/rice_planner/planning/task_store.py

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable

from .errors import ValidationError
from .scoring import validate_effort
from .task_models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory ordered task pool.

    Two views over the same sequence:
    - pool():   insertion order, used for raw editing
    - ranked(): descending score, equal scores keep their pool order

    Invariant: ids are unique at all times.

    Thread-safety:
    - the console thread and the background event loop both touch the store,
      so every read/write goes through one re-entrant lock; replace_all()
      is a single swap under that lock.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._lock = threading.RLock()
        self._tasks: list[Task] = []
        self._last_id = 0
        initial = list(tasks)
        if initial:
            self.replace_all(initial)

    # ---- low-level helpers ----

    def _new_id(self) -> int:
        """Provisional id: millisecond timestamp, bumped to stay strictly increasing and unused."""
        candidate = int(time.time() * 1000)
        taken = {t.id for t in self._tasks}
        floor = max([self._last_id, *taken]) if taken else self._last_id
        if candidate <= floor:
            candidate = floor + 1
        self._last_id = candidate
        return candidate

    # ---- public API ----

    def add(
        self,
        *,
        name: str,
        reach: float,
        impact: float,
        confidence: int,
        strategy: float = 1.0,
        effort: float,
    ) -> Task:
        if not name or not name.strip():
            raise ValidationError("Task name is required")
        validate_effort(effort)

        with self._lock:
            task = Task(
                id=self._new_id(),
                name=name.strip(),
                reach=float(reach),
                impact=float(impact),
                confidence=int(confidence),
                strategy=float(strategy),
                effort=float(effort),
                score=0.0,
                synced=False,
            )
            self._tasks.append(task)

        logger.debug("Task added id=%s name=%r effort=%s", task.id, task.name, task.effort)
        return task

    def remove(self, task_id: int) -> Task | None:
        """Remove by id. Absent ids are a no-op (returns None)."""
        with self._lock:
            for i, task in enumerate(self._tasks):
                if task.id == task_id:
                    del self._tasks[i]
                    logger.debug("Task removed id=%s", task_id)
                    return task
        return None

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Discard the current pool and install `tasks` as the new pool order, atomically."""
        new_tasks = list(tasks)
        seen: set[int] = set()
        for task in new_tasks:
            if task.id in seen:
                raise ValidationError(f"Duplicate task id {task.id}")
            seen.add(task.id)

        with self._lock:
            self._tasks = new_tasks
            if seen:
                self._last_id = max(self._last_id, *seen)

        logger.debug("TaskStore replaced: %d tasks", len(new_tasks))

    def ranked(self) -> list[Task]:
        """
        New list sorted by descending score.

        Tie-break: equal scores keep their relative pool order. The position
        is part of the sort key, so this does not depend on sort stability.
        """
        with self._lock:
            indexed = list(enumerate(self._tasks))
        indexed.sort(key=lambda pair: (-pair[1].score, pair[0]))
        return [task for _, task in indexed]

    def pool(self) -> list[Task]:
        with self._lock:
            return list(self._tasks)

    def get(self, task_id: int) -> Task | None:
        with self._lock:
            for task in self._tasks:
                if task.id == task_id:
                    return task
        return None

    def is_analyzed(self) -> bool:
        ranked = self.ranked()
        return bool(ranked) and ranked[0].is_scored

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        with self._lock:
            return any(t.id == task_id for t in self._tasks)
