"""
Hierarchical fatigue model — per-exercise fatigue rates.

Each exercise gets a baseline fatigue rate: the fraction of performance
lost per additional set.  Rates are learned from the athlete's own set
sequences and partially pooled toward a population default.

Within-session rate
-------------------
Sets of one exercise in one session, ordered by set index:

- with RPE on at least two sets — least-squares slope of RPE per set:

      rate = 0.05 + 0.05 × rpe_slope

- otherwise, with at least two sets at the first set's weight — rep drop
  per set relative to the first set:

      rate = 0.05 + 0.5 × (rep_drop_per_set / first_reps)

Rates are clamped to [0, 0.5].

Pooling
-------
Session rates are averaged weighted by (sets − 1), so a 5-set session
counts more than a 2-set one.  ``sample_size`` is the number of sessions
with a usable estimate.  The pooled rate is shrunk toward the population
rate (0.15):

    w    = n / (n + 2)
    rate = w × raw + (1 − w) × 0.15

At the confidence gate (n = 3) the athlete's own data already carries
60 % of the weight and dominates from there on.  Below the gate the
exercise reports the population rate with its true ``sample_size`` so
callers can tell low confidence apart.

During a workout the current session is blended in as one extra sample
for confident exercises (:func:`nudged_rate`) without touching the
cached model.
"""

from __future__ import annotations

import datetime
import logging
from collections import defaultdict
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, Field

from app.schemas.hierarchical import (
    POPULATION_FATIGUE_RATE,
    ExerciseFatigueFactor,
    HierarchicalFatigueModel,
)
from app.schemas.workout import SessionRecord, SetRecord

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================


class HierarchicalConfig(BaseModel):
    """Configuration for the per-exercise fatigue rates."""

    population_rate: float = Field(POPULATION_FATIGUE_RATE, ge=0.0, le=1.0)
    min_sessions: int = Field(3, ge=1, description="Confidence gate on sample size")
    prior_strength: float = Field(2.0, gt=0.0, description="Pseudo-sessions backing the population rate")
    base_rate: float = Field(0.05, ge=0.0)
    rpe_slope_weight: float = Field(0.05, ge=0.0)
    rep_drop_weight: float = Field(0.5, ge=0.0)
    min_rate: float = Field(0.0, ge=0.0)
    max_rate: float = Field(0.5, le=1.0)


DEFAULT_HIERARCHICAL_CONFIG = HierarchicalConfig()


# ======================================================================
# Within-session estimate
# ======================================================================


def _clamp_rate(rate: float, config: HierarchicalConfig) -> float:
    return max(config.min_rate, min(config.max_rate, rate))


def _slope(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Least-squares slope of ys over xs."""
    n = len(xs)
    mean_x = sum(xs) / n
    mean_y = sum(ys) / n
    denom = sum((x - mean_x) ** 2 for x in xs)
    if denom == 0:
        return 0.0
    return sum((x - mean_x) * (y - mean_y) for x, y in zip(xs, ys)) / denom


def session_rate(
    sets: Sequence[SetRecord],
    config: HierarchicalConfig = DEFAULT_HIERARCHICAL_CONFIG,
) -> Optional[float]:
    """Fatigue rate observed in one session of one exercise (None if unusable)."""
    ordered = sorted((s for s in sets if s.completed), key=lambda s: s.set_index)
    if len(ordered) < 2:
        return None

    rated = [(i, s.effective_rpe) for i, s in enumerate(ordered) if s.effective_rpe is not None]
    if len(rated) >= 2:
        slope = _slope([float(i) for i, _ in rated], [float(r) for _, r in rated])
        return _clamp_rate(config.base_rate + config.rpe_slope_weight * slope, config)

    first = ordered[0]
    if not first.actual_reps or first.actual_weight is None:
        return None
    same_weight = [
        (i, s.actual_reps)
        for i, s in enumerate(ordered)
        if s.actual_weight == first.actual_weight and s.actual_reps is not None
    ]
    if len(same_weight) < 2:
        return None
    drop_per_set = -_slope([float(i) for i, _ in same_weight], [float(r) for _, r in same_weight])
    return _clamp_rate(config.base_rate + config.rep_drop_weight * (drop_per_set / first.actual_reps), config)


# ======================================================================
# Pooling
# ======================================================================


def shrink(raw_rate: float, sample_size: int, config: HierarchicalConfig = DEFAULT_HIERARCHICAL_CONFIG) -> float:
    """Blend *raw_rate* toward the population rate by sample size."""
    if sample_size < config.min_sessions:
        return config.population_rate
    w = sample_size / (sample_size + config.prior_strength)
    return _clamp_rate(w * raw_rate + (1.0 - w) * config.population_rate, config)


def _group_by_exercise(sessions: Iterable[SessionRecord]) -> dict[str, list[list[SetRecord]]]:
    grouped: dict[str, list[list[SetRecord]]] = defaultdict(list)
    for session in sessions:
        if not session.is_completed:
            continue
        per_exercise: dict[str, list[SetRecord]] = defaultdict(list)
        for s in session.completed_sets():
            per_exercise[s.exercise_id].append(s)
        for exercise_id, sets in per_exercise.items():
            grouped[exercise_id].append(sets)
    return grouped


def _pool(
    session_sets: list[list[SetRecord]],
    config: HierarchicalConfig,
) -> ExerciseFatigueFactor:
    weighted_sum = 0.0
    total_weight = 0.0
    sample_size = 0
    set_count = 0

    for sets in session_sets:
        set_count += len(sets)
        rate = session_rate(sets, config)
        if rate is None:
            continue
        weight = len(sets) - 1
        weighted_sum += rate * weight
        total_weight += weight
        sample_size += 1

    raw = weighted_sum / total_weight if total_weight > 0 else config.population_rate
    return ExerciseFatigueFactor(
        baseline_fatigue_rate=round(shrink(raw, sample_size, config), 4),
        sample_size=sample_size,
        set_count=set_count,
    )


# ======================================================================
# Main entry points
# ======================================================================


def build_hierarchical_model(
    sessions: Iterable[SessionRecord],
    built_at: datetime.datetime,
    config: HierarchicalConfig = DEFAULT_HIERARCHICAL_CONFIG,
) -> HierarchicalFatigueModel:
    """Full rebuild of the per-exercise fatigue model from history."""
    sessions = [s for s in sessions if s.is_completed]
    grouped = _group_by_exercise(sessions)
    exercises = {exercise_id: _pool(sets, config) for exercise_id, sets in sorted(grouped.items())}

    logger.debug(
        "Built hierarchical fatigue model: %d exercises, %d confident",
        len(exercises),
        sum(1 for f in exercises.values() if f.sample_size >= config.min_sessions),
    )

    return HierarchicalFatigueModel(
        population_rate=config.population_rate,
        min_sample_size=config.min_sessions,
        exercises=exercises,
        total_sessions=len(sessions),
        total_sets=sum(f.set_count for f in exercises.values()),
        built_at=built_at,
    )


def population_model(
    built_at: datetime.datetime,
    config: HierarchicalConfig = DEFAULT_HIERARCHICAL_CONFIG,
) -> HierarchicalFatigueModel:
    """Empty model: every exercise reads the population rate."""
    return HierarchicalFatigueModel(
        population_rate=config.population_rate,
        min_sample_size=config.min_sessions,
        built_at=built_at,
    )


def rate_for(model: HierarchicalFatigueModel, exercise_id: str) -> float:
    return model.factor_for(exercise_id).baseline_fatigue_rate


def nudged_rate(
    model: HierarchicalFatigueModel,
    exercise_id: str,
    current_sets: Iterable[SetRecord],
    config: HierarchicalConfig = DEFAULT_HIERARCHICAL_CONFIG,
) -> float:
    """Rate for *exercise_id* with the in-progress session blended in.

    Only confident exercises are nudged: ``(n × prior + observed) / (n + 1)``.
    """
    factor = model.factor_for(exercise_id)
    if factor.sample_size < model.min_sample_size:
        return factor.baseline_fatigue_rate

    observed = session_rate([s for s in current_sets if s.exercise_id == exercise_id], config)
    if observed is None:
        return factor.baseline_fatigue_rate

    n = factor.sample_size
    return _clamp_rate((n * factor.baseline_fatigue_rate + observed) / (n + 1), config)
