# src/rice_planner/planning/errors.py

from __future__ import annotations


class PlannerError(Exception):
    """Base class for every error raised by the planning core."""


class ValidationError(PlannerError, ValueError):
    """Malformed input to a pure operation (e.g. effort <= 0). Nothing was mutated."""


class StateError(PlannerError, RuntimeError):
    """Operation invoked while its precondition does not hold (empty pool, unscored, no session)."""


class BackendError(PlannerError, RuntimeError):
    """
    Remote scorer call failed.

    - status_code: HTTP status for rejected responses, None otherwise
    - unreachable: True for transport-level failures (connect/timeout),
      the only case where the local fallback may step in
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        unreachable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.unreachable = unreachable
