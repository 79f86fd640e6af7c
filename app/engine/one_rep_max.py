"""
Estimated one-rep max (E1RM).

Epley, with reps adjusted for effort: a set of ``reps`` at RPE ``r`` is
treated as ``reps + (10 − r)`` reps to failure.

    e1rm = weight × (1 + reps_to_failure / 30)

RPE values outside 5–10 (or missing) are treated as RPE 8.
"""

from __future__ import annotations

from typing import Iterable, Optional

from app.schemas.workout import SetRecord

_DEFAULT_RPE = 8.0
_MIN_VALID_RPE = 5.0
_MAX_VALID_RPE = 10.0


def _normalise_rpe(rpe: Optional[float]) -> float:
    if rpe is None or not (_MIN_VALID_RPE <= rpe <= _MAX_VALID_RPE):
        return _DEFAULT_RPE
    return rpe


def reps_to_failure(reps: int, rpe: Optional[float]) -> float:
    return reps + (10.0 - _normalise_rpe(rpe))


def estimate_one_rep_max(weight: float, reps: int, rpe: Optional[float] = None) -> float:
    """E1RM of a single weight/reps pair."""
    if weight <= 0 or reps <= 0:
        return 0.0
    return weight * (1.0 + reps_to_failure(reps, rpe) / 30.0)


def weight_for_reps(one_rep_max: float, reps: int, rpe: Optional[float] = None) -> float:
    """Inverse of :func:`estimate_one_rep_max`: load for *reps* at *rpe*."""
    if one_rep_max <= 0 or reps <= 0:
        return 0.0
    return one_rep_max / (1.0 + reps_to_failure(reps, rpe) / 30.0)


def best_one_rep_max(sets: Iterable[SetRecord], exercise_id: str) -> Optional[float]:
    """Highest E1RM over completed sets of *exercise_id* (None when there are none)."""
    best: Optional[float] = None
    for s in sets:
        if s.exercise_id != exercise_id or not s.completed:
            continue
        if not s.actual_weight or not s.actual_reps:
            continue
        e1rm = estimate_one_rep_max(s.actual_weight, s.actual_reps, s.effective_rpe)
        if best is None or e1rm > best:
            best = e1rm
    return best
