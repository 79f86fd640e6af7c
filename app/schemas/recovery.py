"""
Recovery and readiness schemas.

Recovery is an exponential approach to 100 %:

    recovery(t) = 100 × (1 − exp(−k·t)),   k = −ln(0.05) / adjusted_hours

so that 95 % recovery is reached at ``adjusted_hours``.  Readiness is a
1–10 score combining recovery, chronic fatigue and training frequency.
"""

from __future__ import annotations

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.muscle_group import MuscleGroup


class FatigueSnapshot(BaseModel):
    """Per (athlete, session, muscle group) fatigue record.  Append-only."""

    model_config = ConfigDict(frozen=True)

    athlete_id: str
    session_id: str
    muscle_group: MuscleGroup
    fatigue_score: float = Field(..., ge=0.0, le=100.0)
    rpe_overshoot_avg: Optional[float] = None
    form_breakdown_count: int = Field(0, ge=0)
    failure_count: int = Field(0, ge=0)
    volume_load: float = Field(0.0, ge=0.0)
    recorded_at: datetime.datetime


class MuscleTrainingState(BaseModel):
    """Inputs needed to recompute a recovery profile at any instant.

    This is what the model cache stores: percentages depend on the
    evaluation time and are always recomputed on read.
    """

    muscle_group: MuscleGroup
    last_trained_at: datetime.datetime
    last_fatigue_score: float = Field(..., ge=0.0, le=100.0)
    recent_fatigue_scores: list[float] = Field(
        default_factory=list,
        description="Up to 5 most recent fatigue scores, most recent first",
    )
    consecutive_training_days: int = Field(0, ge=0)
    sessions_last_7_days: int = Field(0, ge=0)


class RecoveryStateSet(BaseModel):
    """Cached payload for the recovery-profile model kind."""

    kind: Literal["recovery_profiles"] = "recovery_profiles"
    states: list[MuscleTrainingState] = Field(default_factory=list)
    computed_at: datetime.datetime


class RecoveryProfile(BaseModel):
    """Recovery state of one muscle group at a given instant."""

    muscle_group: MuscleGroup
    last_trained_at: datetime.datetime
    last_fatigue_score: float = Field(..., ge=0.0, le=100.0)
    hours_since_training: float = Field(..., ge=0.0)
    recovery_percentage: float = Field(..., ge=0.0, le=100.0)
    readiness_score: float = Field(..., ge=1.0, le=10.0)
    estimated_full_recovery_at: datetime.datetime


class MuscleReadiness(BaseModel):
    """Per-muscle entry of a pre-workout readiness result."""

    muscle: MuscleGroup
    score: float = Field(..., ge=1.0, le=10.0)
    status: Literal["ready", "recovering", "fatigued"]
    recovery_percentage: float = Field(..., ge=0.0, le=100.0)
    hours_until_ready: Optional[float] = Field(
        None, description="Hours until 95 % recovery (None once reached)",
    )
