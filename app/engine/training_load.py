"""
Session load figures.

Two load definitions are used:

- **volume load** (ACWR input) — the recorded ``total_load`` when present,
  otherwise Σ weight × reps over completed sets;
- **effort-weighted load** (fitness-fatigue impulse) — Σ weight × reps ×
  (RPE / 10), × 1.5 for sets taken to failure, scaled down by 1000.
  Sets without an RPE count as RPE 7.
"""

from __future__ import annotations

from app.schemas.workout import SessionRecord

_DEFAULT_RPE = 7.0
_FAILURE_MULTIPLIER = 1.5
_LOAD_SCALE = 1000.0
# Fraction of a recorded total load counted when no set detail exists.
_TOTAL_LOAD_EFFORT_FACTOR = 0.7


def volume_load(session: SessionRecord) -> float:
    if session.total_load is not None:
        return session.total_load
    return sum(s.volume for s in session.completed_sets())


def effort_load(session: SessionRecord) -> float:
    total = 0.0
    for s in session.completed_sets():
        if s.volume <= 0:
            continue
        rpe = s.effective_rpe if s.effective_rpe is not None else _DEFAULT_RPE
        load = s.volume * (rpe / 10.0)
        if s.reached_failure:
            load *= _FAILURE_MULTIPLIER
        total += load

    if total == 0.0 and session.total_load:
        return session.total_load * _TOTAL_LOAD_EFFORT_FACTOR / _LOAD_SCALE
    return total / _LOAD_SCALE
