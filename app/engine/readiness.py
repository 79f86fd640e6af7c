"""
Readiness scorer — per-muscle 1–10 readiness.

Model
-----
The score starts from the recovery curve and subtracts two penalties:

    base      = recovery_pct / 10
    chronic   = min(5, max(0, (avg − 5) / 10) + 0.5 × max(0, (max − 20) / 15))
    frequency = 3 (<12h) | 2 (<24h) | 1.5 (<36h) | 1 (<48h) | 0

    readiness = clamp(base − chronic − frequency, 1, 10)   (one decimal)

``avg`` and ``max`` are taken over the 5 most recent fatigue scores for
the muscle.  When the hours since training are unknown but at least two
recent scores exist, a flat 1-point frequency penalty applies.

With ``RecoveryConfig.accumulation_penalties`` enabled, back-to-back
training days and a high weekly session count for the muscle subtract a
further, weighted amount (see :func:`accumulation_penalty`).

Muscle state
------------
Percentages depend on the evaluation time, so what is derived from
history (and cached) is a :class:`MuscleTrainingState` per muscle; the
:class:`RecoveryProfile` is rebuilt from it on every read.  The state of
a muscle comes from the completed sessions of the last 14 days: each
session is scored with the session-fatigue formula over the sets that
train that muscle, and the latest such session sets ``last_trained_at``.
"""

from __future__ import annotations

import datetime
from collections import defaultdict
from typing import Callable, Iterable, Optional, Sequence

from app.engine.recovery_curve import (
    DEFAULT_RECOVERY_CONFIG,
    RecoveryConfig,
    estimated_full_recovery_at,
    hours_until_ready,
    recovery_percentage,
)
from app.engine.session_fatigue import compute_indicators, score_indicators, session_fatigue_score
from app.schemas.muscle_group import MuscleGroup, MuscleGroupLookup
from app.schemas.recovery import FatigueSnapshot, MuscleReadiness, MuscleTrainingState, RecoveryProfile
from app.schemas.workout import SessionRecord, SetRecord

# ======================================================================
# Configuration
# ======================================================================

MIN_READINESS = 1.0
MAX_READINESS = 10.0

# (max hours exclusive, penalty)
_FREQUENCY_PENALTIES: list[tuple[float, float]] = [
    (12.0, 3.0),
    (24.0, 2.0),
    (36.0, 1.5),
    (48.0, 1.0),
]
_UNKNOWN_FREQUENCY_PENALTY = 1.0

_STATUS_THRESHOLDS: list[tuple[str, float, float]] = [
    ("fatigued", MIN_READINESS, 6.0),
    ("recovering", 6.0, 8.0),
    ("ready", 8.0, float("inf")),
]


# ======================================================================
# Status labelling
# ======================================================================


def _label_status(score: float) -> str:
    """Map a readiness score to ready / recovering / fatigued."""
    for label, low, high in _STATUS_THRESHOLDS:
        if low <= score < high:
            return label
    return "fatigued" if score < MIN_READINESS else "ready"


# ======================================================================
# Penalties
# ======================================================================


def chronic_fatigue_penalty(recent_scores: Sequence[float]) -> float:
    """Penalty for sustained and peak recent fatigue (0–5)."""
    if not recent_scores:
        return 0.0
    avg = sum(recent_scores) / len(recent_scores)
    peak = max(recent_scores)
    return min(5.0, max(0.0, (avg - 5.0) / 10.0) + 0.5 * max(0.0, (peak - 20.0) / 15.0))


def frequency_penalty(hours_since_training: Optional[float], snapshot_count: int = 0) -> float:
    """Penalty for training the same muscle again too soon."""
    if hours_since_training is None:
        return _UNKNOWN_FREQUENCY_PENALTY if snapshot_count >= 2 else 0.0
    for limit, penalty in _FREQUENCY_PENALTIES:
        if hours_since_training < limit:
            return penalty
    return 0.0


def accumulation_penalty(
    consecutive_days: int,
    sessions_last_7_days: int,
    config: RecoveryConfig = DEFAULT_RECOVERY_CONFIG,
) -> float:
    """Optional penalty for back-to-back training days and a high weekly count.

    Off unless ``config.accumulation_penalties`` is set.  Consecutive days
    cost one point per day beyond the first (capped), each weekly session
    beyond ``high_weekly_frequency`` costs half a point, and the total is
    scaled by ``accumulation_weight``.
    """
    if not config.accumulation_penalties:
        return 0.0
    penalty = 0.0
    if consecutive_days >= config.consecutive_days_start:
        penalty += min(float(consecutive_days - 1), config.max_consecutive_penalty)
    if sessions_last_7_days > config.high_weekly_frequency:
        penalty += (sessions_last_7_days - config.high_weekly_frequency) * 0.5
    return penalty * config.accumulation_weight


def score_readiness(
    recovery_pct: float,
    recent_scores: Sequence[float] = (),
    hours_since_training: Optional[float] = None,
    extra_penalty: float = 0.0,
) -> float:
    """Readiness (1–10, one decimal) from recovery and recent fatigue."""
    base = max(0.0, min(100.0, recovery_pct)) / 10.0
    penalty = chronic_fatigue_penalty(recent_scores) + frequency_penalty(hours_since_training, len(recent_scores))
    penalty += max(0.0, extra_penalty)
    return round(max(MIN_READINESS, min(MAX_READINESS, base - penalty)), 1)


# ======================================================================
# Profiles
# ======================================================================


def build_recovery_profile(
    state: MuscleTrainingState,
    as_of: datetime.datetime,
    config: RecoveryConfig = DEFAULT_RECOVERY_CONFIG,
) -> RecoveryProfile:
    """Evaluate *state* at *as_of*."""
    hours = max(0.0, (as_of - state.last_trained_at).total_seconds() / 3600.0)
    pct = recovery_percentage(state.muscle_group, state.last_fatigue_score, hours, config)
    return RecoveryProfile(
        muscle_group=state.muscle_group,
        last_trained_at=state.last_trained_at,
        last_fatigue_score=state.last_fatigue_score,
        hours_since_training=hours,
        recovery_percentage=round(pct, 1),
        readiness_score=score_readiness(
            pct,
            state.recent_fatigue_scores,
            hours,
            accumulation_penalty(state.consecutive_training_days, state.sessions_last_7_days, config),
        ),
        estimated_full_recovery_at=estimated_full_recovery_at(
            state.muscle_group, state.last_trained_at, state.last_fatigue_score, config,
        ),
    )


def to_muscle_readiness(
    profile: RecoveryProfile,
    as_of: datetime.datetime,
    config: RecoveryConfig = DEFAULT_RECOVERY_CONFIG,
) -> MuscleReadiness:
    remaining: Optional[float] = None
    if profile.recovery_percentage < config.target_recovery_pct:
        remaining = round(
            hours_until_ready(
                profile.muscle_group, profile.last_trained_at, profile.last_fatigue_score, as_of, config,
            ),
            1,
        )
    return MuscleReadiness(
        muscle=profile.muscle_group,
        score=profile.readiness_score,
        status=_label_status(profile.readiness_score),
        recovery_percentage=profile.recovery_percentage,
        hours_until_ready=remaining,
    )


def rank_least_ready(entries: Iterable[MuscleReadiness]) -> list[MuscleReadiness]:
    """Least-ready muscle first; ties broken by label for stable output."""
    return sorted(entries, key=lambda m: (m.score, m.muscle.value))


# ======================================================================
# Muscle state derivation
# ======================================================================


def _sets_by_muscle(
    sets: Iterable[SetRecord],
    muscle_lookup: MuscleGroupLookup,
) -> dict[MuscleGroup, list[SetRecord]]:
    grouped: dict[MuscleGroup, list[SetRecord]] = defaultdict(list)
    for s in sets:
        if not s.completed:
            continue
        for muscle in muscle_lookup(s.exercise_id):
            grouped[muscle].append(s)
    return grouped


def muscle_fatigue_scores(
    session: SessionRecord,
    muscle_lookup: MuscleGroupLookup,
) -> dict[MuscleGroup, float]:
    """Session-fatigue score per muscle trained in *session*."""
    return {
        muscle: round(session_fatigue_score(sets), 1)
        for muscle, sets in _sets_by_muscle(session.sets, muscle_lookup).items()
    }


def consecutive_training_days(trained_at: Iterable[datetime.datetime], as_of: datetime.datetime) -> int:
    """Length of the most recent run of calendar days with training, within the last week.

    Counting walks back from the day of *as_of*; days before the first
    trained day are skipped, and the first gap after it ends the run.
    """
    days = {at.date() for at in trained_at}
    run = 0
    for offset in range(7):
        if as_of.date() - datetime.timedelta(days=offset) in days:
            run += 1
        elif run:
            break
    return run


def derive_training_states(
    sessions: Iterable[SessionRecord],
    muscle_lookup: MuscleGroupLookup,
    as_of: datetime.datetime,
    recent_scores_for: Optional[Callable[[MuscleGroup], Sequence[float]]] = None,
    config: RecoveryConfig = DEFAULT_RECOVERY_CONFIG,
) -> list[MuscleTrainingState]:
    """Derive the training state of every muscle trained within the lookback window.

    *recent_scores_for* returns the recent persisted fatigue snapshot scores
    of a muscle (most recent first).  Where a muscle has none, the scores
    derived from the sessions themselves are used instead.
    """
    since = as_of - datetime.timedelta(days=config.lookback_days)
    window = sorted(
        (s for s in sessions if s.is_completed and since <= s.performed_at <= as_of),
        key=lambda s: s.performed_at,
        reverse=True,
    )

    history: dict[MuscleGroup, list[tuple[datetime.datetime, float]]] = defaultdict(list)
    for session in window:
        for muscle, score in muscle_fatigue_scores(session, muscle_lookup).items():
            history[muscle].append((session.performed_at, score))

    week_start = as_of - datetime.timedelta(days=7)
    states: list[MuscleTrainingState] = []
    for muscle, entries in history.items():
        last_at, last_score = entries[0]
        recent = list(recent_scores_for(muscle))[: config.snapshot_limit] if recent_scores_for else []
        if not recent:
            recent = [score for _, score in entries[: config.snapshot_limit]]
        states.append(
            MuscleTrainingState(
                muscle_group=muscle,
                last_trained_at=last_at,
                last_fatigue_score=last_score,
                recent_fatigue_scores=recent,
                consecutive_training_days=consecutive_training_days((at for at, _ in entries), as_of),
                sessions_last_7_days=sum(1 for at, _ in entries if at > week_start),
            )
        )
    states.sort(key=lambda st: st.muscle_group.value)
    return states


def fatigue_snapshots_for_session(
    athlete_id: str,
    session: SessionRecord,
    muscle_lookup: MuscleGroupLookup,
) -> list[FatigueSnapshot]:
    """One fatigue snapshot per muscle trained in *session*."""
    snapshots: list[FatigueSnapshot] = []
    for muscle, sets in sorted(_sets_by_muscle(session.sets, muscle_lookup).items(), key=lambda kv: kv[0].value):
        indicators = compute_indicators(sets)
        snapshots.append(
            FatigueSnapshot(
                athlete_id=athlete_id,
                session_id=session.session_id,
                muscle_group=muscle,
                fatigue_score=round(score_indicators(indicators), 1),
                rpe_overshoot_avg=round(indicators.rpe_overshoot, 2),
                form_breakdown_count=indicators.form_breakdown,
                failure_count=indicators.unintentional_failure,
                volume_load=indicators.volume_accumulation,
                recorded_at=session.performed_at,
            )
        )
    return snapshots
