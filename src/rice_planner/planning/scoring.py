# src/rice_planner/planning/scoring.py

"""
RICE-style priority score.

    score = (reach * impact * (confidence / 100) * strategy) / effort

This is the canonical definition of "priority". The remote scorer applies the
same formula; its results are taken as-is and never re-derived here.
"""

from __future__ import annotations

from .errors import ValidationError
from .task_models import Task


def validate_effort(effort: float) -> None:
    if effort <= 0:
        raise ValidationError(f"Effort must be > 0 (got {effort})")


def compute_score(
    reach: float,
    impact: float,
    confidence: float,
    strategy: float,
    effort: float,
) -> float:
    """Pure and deterministic. Only `effort` is validated; nothing is clamped."""
    validate_effort(effort)
    return (reach * impact * (confidence / 100) * strategy) / effort


def score_task(task: Task) -> float:
    return compute_score(task.reach, task.impact, task.confidence, task.strategy, task.effort)
