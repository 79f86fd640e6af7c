"""
ACWR (Acute:Chronic Workload Ratio) — whole-athlete load spike indicator.

    acute   = Σ load over (as_of − 7d, as_of]
    chronic = Σ load over (as_of − 28d, as_of] / 4      (weekly average)
    ratio   = acute / chronic

Loads are session volume loads: the recorded total when present,
otherwise Σ weight × reps over completed sets.

Status bands are fixed constants with inclusive upper bounds:

    detraining     < 0.8
    optimal        0.8 – 1.3
    building       1.3 – 1.5
    high_risk      1.5 – 2.0
    critical_risk  > 2.0

Design choices
--------------
1. **Neutral when undefined** — zero chronic load, or fewer than 3
   sessions in the chronic window, yields ratio 1.0 with status
   ``unknown``.  A single first session would otherwise read as a 4.0
   spike.
2. **Encapsulated windows** — acute/chronic lengths live in
   :class:`ACWRConfig`.
3. **Monotony and strain** — mean / stdev of the chronic-window session
   loads, and chronic-window load × monotony (Foster).
"""

from __future__ import annotations

import datetime
import statistics
from typing import Iterable

from pydantic import BaseModel, Field

from app.engine.training_load import volume_load
from app.schemas.acwr import ACWRResult, ACWRStatus, LoadPoint
from app.schemas.workout import SessionRecord

# ======================================================================
# Configuration
# ======================================================================


class ACWRConfig(BaseModel):
    """Configuration for the ACWR computation."""

    acute_days: int = Field(7, ge=1, le=14)
    chronic_days: int = Field(28, ge=14, le=56)
    min_sessions: int = Field(3, ge=1, description="Sessions needed in the chronic window")

    @property
    def chronic_weeks(self) -> float:
        return self.chronic_days / 7.0


DEFAULT_ACWR_CONFIG = ACWRConfig()

# ======================================================================
# Status labelling
# ======================================================================

_THRESHOLDS: list[tuple[str, float, float]] = [
    ("detraining", 0.0, 0.8),
    ("optimal", 0.8, 1.3),
    ("building", 1.3, 1.5),
    ("high_risk", 1.5, 2.0),
    ("critical_risk", 2.0, float("inf")),
]

_RECOMMENDATIONS: dict[str, str] = {
    "detraining": "Training load is well below your recent average. Gradually increase volume to avoid detraining.",
    "optimal": "Training load is in the optimal range. Maintain your current progression.",
    "building": "Training load is building quickly. Progress carefully and prioritise recovery.",
    "high_risk": "Training load spiked well above your recent average. Consider reducing volume this week.",
    "critical_risk": "Training load is far above what you are adapted to. Reduce volume and intensity now.",
    "unknown": "Not enough recent training history to assess workload. Keep logging sessions.",
}


def _label_acwr(value: float) -> ACWRStatus:
    """Map an ACWR float to its status label (upper bounds inclusive)."""
    if value < _THRESHOLDS[0][2]:
        return "detraining"
    for label, low, high in _THRESHOLDS[1:]:
        if low <= value <= high:
            return label  # type: ignore[return-value]
    return "critical_risk"


# ======================================================================
# Load series
# ======================================================================


def session_load_points(sessions: Iterable[SessionRecord]) -> list[LoadPoint]:
    """One (date, volume load) point per completed session, oldest first."""
    points = [
        LoadPoint(on=s.performed_at, load=volume_load(s))
        for s in sessions
        if s.is_completed
    ]
    points.sort(key=lambda p: p.on)
    return points


def _window(points: Iterable[LoadPoint], as_of: datetime.datetime, days: int) -> list[LoadPoint]:
    start = as_of - datetime.timedelta(days=days)
    return [p for p in points if start < p.on <= as_of]


def _monotony(loads: list[float]) -> float:
    if len(loads) < 2:
        return 1.0
    stdev = statistics.pstdev(loads)
    if stdev == 0:
        return 1.0
    return statistics.fmean(loads) / stdev


# ======================================================================
# Main entry point
# ======================================================================


def compute_acwr(
    points: Iterable[LoadPoint],
    as_of: datetime.datetime,
    config: ACWRConfig = DEFAULT_ACWR_CONFIG,
) -> ACWRResult:
    """Compute the acute:chronic workload ratio at *as_of*."""
    points = list(points)
    acute = _window(points, as_of, config.acute_days)
    chronic = _window(points, as_of, config.chronic_days)

    acute_sum = sum(p.load for p in acute)
    chronic_sum = sum(p.load for p in chronic)
    chronic_weekly = chronic_sum / config.chronic_weeks

    monotony = _monotony([p.load for p in chronic])
    strain = chronic_sum * monotony

    sufficient = len(chronic) >= config.min_sessions and chronic_weekly > 0
    if sufficient:
        ratio = round(acute_sum / chronic_weekly, 3)
        status = _label_acwr(ratio)
    else:
        ratio = 1.0
        status = "unknown"

    return ACWRResult(
        acwr=ratio,
        status=status,
        acute_load=round(acute_sum, 2),
        chronic_load=round(chronic_weekly, 2),
        training_monotony=round(monotony, 3),
        training_strain=round(strain, 2),
        sessions_in_window=len(chronic),
        has_sufficient_history=sufficient,
        recommendation=_RECOMMENDATIONS[status],
        as_of=as_of,
    )


def compute_acwr_from_sessions(
    sessions: Iterable[SessionRecord],
    as_of: datetime.datetime,
    config: ACWRConfig = DEFAULT_ACWR_CONFIG,
) -> ACWRResult:
    return compute_acwr(session_load_points(sessions), as_of, config)


def unknown_acwr(as_of: datetime.datetime) -> ACWRResult:
    """Neutral result used when the load history cannot be read."""
    return ACWRResult(
        acwr=1.0,
        status="unknown",
        acute_load=0.0,
        chronic_load=0.0,
        has_sufficient_history=False,
        recommendation=_RECOMMENDATIONS["unknown"],
        as_of=as_of,
    )
