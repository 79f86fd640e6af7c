"""
Recovery curve — per-muscle exponential recovery.

Recovery after a session approaches 100 % exponentially:

    recovery(t) = 100 × (1 − exp(−k·t)),   k = −ln(0.05) / adjusted_hours

so the muscle is 95 % recovered after exactly ``adjusted_hours``.  The
window scales with how hard the muscle was hit last time:

    adjusted_hours = base_hours × clamp(1 + (fatigue − 50) / 200, 0.8, 1.5)

A fatigue score of 50 leaves the base window unchanged; a maximal score
stretches it by 25 % (the 1.5 cap is never reached with scores <= 100)
and light sessions shorten it by up to 20 %.

Design choices
--------------
1. **Monotone in elapsed time** — for a fixed fatigue score the curve
   never decreases; negative elapsed time is treated as zero.
2. **Bounded** — the curve tends to 100 % and is clamped to [0, 100].
3. **Table-driven** — base hours live in :class:`RecoveryConfig` so tests
   can inject other tables.
"""

from __future__ import annotations

import datetime
import math

from pydantic import BaseModel, Field

from app.schemas.muscle_group import (
    BASE_RECOVERY_HOURS,
    DEFAULT_BASE_RECOVERY_HOURS,
    MuscleGroup,
    parse_muscle_group,
)

# ======================================================================
# Configuration
# ======================================================================

# Fraction of fatigue still present once "recovered".
_RESIDUAL_AT_TARGET = 0.05


class RecoveryConfig(BaseModel):
    """Configuration for recovery curves and per-muscle readiness."""

    base_recovery_hours: dict[str, float] = Field(
        default_factory=lambda: {m.value: h for m, h in BASE_RECOVERY_HOURS.items()},
    )
    default_recovery_hours: float = Field(DEFAULT_BASE_RECOVERY_HOURS, gt=0.0)
    min_severity_multiplier: float = Field(0.8, gt=0.0)
    max_severity_multiplier: float = Field(1.5, gt=0.0)
    target_recovery_pct: float = Field(95.0, gt=0.0, lt=100.0)
    lookback_days: int = Field(14, ge=1, description="History window used to derive muscle state")
    snapshot_limit: int = Field(5, ge=1, description="Recent fatigue snapshots per muscle")
    accumulation_penalties: bool = Field(
        False, description="Also penalise consecutive training days and high weekly frequency",
    )
    consecutive_days_start: int = Field(2, ge=1)
    max_consecutive_penalty: float = Field(4.0, ge=0.0)
    high_weekly_frequency: int = Field(4, ge=0, description="Sessions per muscle per 7 days before penalising")
    accumulation_weight: float = Field(0.2, ge=0.0, le=1.0)

    def base_hours_for(self, muscle_group: MuscleGroup | str) -> float:
        group = parse_muscle_group(muscle_group)
        if group is None:
            return self.default_recovery_hours
        return self.base_recovery_hours.get(group.value, self.default_recovery_hours)


DEFAULT_RECOVERY_CONFIG = RecoveryConfig()


# ======================================================================
# Curve
# ======================================================================


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def severity_multiplier(fatigue_score: float, config: RecoveryConfig = DEFAULT_RECOVERY_CONFIG) -> float:
    """Window multiplier for a last-session fatigue score (0–100)."""
    fatigue = _clamp(fatigue_score, 0.0, 100.0)
    return _clamp(
        1.0 + (fatigue - 50.0) / 200.0,
        config.min_severity_multiplier,
        config.max_severity_multiplier,
    )


def adjusted_recovery_hours(
    muscle_group: MuscleGroup | str,
    fatigue_score: float,
    config: RecoveryConfig = DEFAULT_RECOVERY_CONFIG,
) -> float:
    """Hours until *muscle_group* reaches the target recovery percentage."""
    return config.base_hours_for(muscle_group) * severity_multiplier(fatigue_score, config)


def recovery_percentage(
    muscle_group: MuscleGroup | str,
    fatigue_score: float,
    hours_elapsed: float,
    config: RecoveryConfig = DEFAULT_RECOVERY_CONFIG,
) -> float:
    """Recovery percentage (0–100) after *hours_elapsed*."""
    hours = max(0.0, hours_elapsed)
    k = -math.log(_RESIDUAL_AT_TARGET) / adjusted_recovery_hours(muscle_group, fatigue_score, config)
    return _clamp(100.0 * (1.0 - math.exp(-k * hours)), 0.0, 100.0)


def estimated_full_recovery_at(
    muscle_group: MuscleGroup | str,
    last_trained_at: datetime.datetime,
    fatigue_score: float,
    config: RecoveryConfig = DEFAULT_RECOVERY_CONFIG,
) -> datetime.datetime:
    """Instant at which the target recovery percentage is reached."""
    hours = adjusted_recovery_hours(muscle_group, fatigue_score, config)
    return last_trained_at + datetime.timedelta(hours=hours)


def hours_until_ready(
    muscle_group: MuscleGroup | str,
    last_trained_at: datetime.datetime,
    fatigue_score: float,
    as_of: datetime.datetime,
    config: RecoveryConfig = DEFAULT_RECOVERY_CONFIG,
) -> float:
    """Hours remaining until full recovery (0 once reached)."""
    ready_at = estimated_full_recovery_at(muscle_group, last_trained_at, fatigue_score, config)
    return max(0.0, (ready_at - as_of).total_seconds() / 3600.0)
