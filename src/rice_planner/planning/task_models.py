# src/rice_planner/planning/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import BackendError


class ImpactTier(float, Enum):
    """
    Named impact magnitudes.

    Any other positive multiplier is accepted, it just has no label.
    """

    MASSIVE = 3.0
    HIGH = 2.0
    MEDIUM = 1.0
    LOW = 0.5

    @classmethod
    def label_for(cls, value: float) -> str | None:
        for tier in cls:
            if float(tier) == float(value):
                return tier.name.lower()
        return None

    @classmethod
    def parse(cls, raw: str) -> float:
        """Accept a tier name ("high") or a plain number ("1.5")."""
        text = (raw or "").strip()
        try:
            return float(cls[text.upper()])
        except KeyError:
            return float(text)


@dataclass(slots=True, frozen=True)
class Task:
    """
    A unit of prospective work.

    `id` is provisional (client-generated) while `synced` is False and
    backend-confirmed once a sync cycle installed it.
    `score` stays 0.0 until the scorer has run.
    """

    id: int
    name: str
    reach: float
    impact: float
    confidence: int
    strategy: float
    effort: float
    score: float = 0.0
    synced: bool = False

    @property
    def is_scored(self) -> bool:
        return self.score != 0

    @property
    def impact_label(self) -> str | None:
        return ImpactTier.label_for(self.impact)


@dataclass(slots=True, frozen=True)
class PlanResult:
    """Outcome of one greedy capacity planning pass."""

    selected: tuple[Task, ...]
    skipped: tuple[Task, ...]
    used_effort: float
    utilization_percent: int
    capacity: float

    @property
    def remaining_capacity(self) -> float:
        return max(0.0, self.capacity - self.used_effort)


def task_to_wire(task: Task, username: str) -> dict[str, Any]:
    """
    Body for POST /api/calculate.

    The id always travels (provisional ones included) so the server can
    match a re-sent task to a record it already saved.
    """
    return {
        "id": task.id,
        "name": task.name,
        "reach": task.reach,
        "impact": task.impact,
        "confidence": task.confidence,
        "strategy": task.strategy,
        "effort": task.effort,
        "username": username,
    }


def task_from_wire(payload: Any) -> Task:
    """Parse one authoritative task object returned by the backend."""
    if not isinstance(payload, dict):
        raise BackendError(f"Malformed task payload: expected object, got {type(payload).__name__}")

    try:
        task = Task(
            id=int(payload["id"]),
            name=str(payload.get("name") or ""),
            reach=float(payload["reach"]),
            impact=float(payload["impact"]),
            confidence=int(payload["confidence"]),
            strategy=float(payload.get("strategy", 1.0)),
            effort=float(payload["effort"]),
            score=float(payload.get("score") or 0.0),
            synced=True,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise BackendError(f"Malformed task payload: {e!r}") from e

    if task.effort <= 0:
        raise BackendError(f"Malformed task payload: effort must be > 0 (id={task.id})")
    return task
