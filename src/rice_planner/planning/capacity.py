# src/rice_planner/planning/capacity.py

"""
Greedy sprint planner.

Walks the ranked list once and accepts every task that still fits. A skipped
task is never reconsidered, and a lower-ranked task is never swapped in for a
higher-ranked one to raise utilization. Strict priority order wins over
filling capacity; this is not a knapsack solver.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from .errors import StateError
from .task_models import PlanResult, Task

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    # round() would give 62 for 62.5
    return int(math.floor(value + 0.5))


def utilization_percent(used: float, capacity: float) -> int:
    if capacity <= 0:
        return 0
    return _round_half_up(used / capacity * 100)


def plan(ranked_tasks: Sequence[Task], capacity: float) -> PlanResult:
    """
    Select a priority-ordered prefix-by-fit of `ranked_tasks` within `capacity`.

    Raises StateError("not analyzed") when the list is empty or its top task
    has never been scored. Capacity <= 0 is accepted and selects nothing.
    """
    if not ranked_tasks or not ranked_tasks[0].is_scored:
        raise StateError("not analyzed")

    used = 0.0
    selected: list[Task] = []
    skipped: list[Task] = []

    for task in ranked_tasks:
        if used + task.effort <= capacity:
            selected.append(task)
            used += task.effort
        else:
            skipped.append(task)

    result = PlanResult(
        selected=tuple(selected),
        skipped=tuple(skipped),
        used_effort=used,
        utilization_percent=utilization_percent(used, capacity),
        capacity=float(capacity),
    )
    logger.info(
        "Plan: selected=%d skipped=%d used=%s capacity=%s utilization=%d%%",
        len(result.selected),
        len(result.skipped),
        used,
        capacity,
        result.utilization_percent,
    )
    return result
