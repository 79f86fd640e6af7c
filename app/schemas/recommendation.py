"""
Set recommendation schemas.

Adjustments are applied multiplicatively in a fixed order; each one is
recorded for traceability.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.session_fatigue import FatigueAlert
from app.schemas.workout import SetRecord

BaselineSource = Literal["historical", "prescribed", "default"]
ConfidenceTag = Literal["high", "medium", "low"]


class Baseline(BaseModel):
    """Starting weight before any adjustment."""

    source: BaselineSource
    weight: float = Field(..., ge=0.0)
    reps: int = Field(..., ge=0)


class Adjustment(BaseModel):
    """One applied weight adjustment."""

    factor: Literal["muscle_readiness", "acwr_overreach", "session_fatigue", "exercise_fatigue"]
    adjustment: float = Field(..., le=0.0, description="Signed fraction, e.g. -0.05 for a 5 % cut")
    reason: str


class SetRecommendation(BaseModel):
    """Weight/rep suggestion for the next set."""

    exercise_id: str
    set_number: int
    suggested_weight: float = Field(..., ge=0.0)
    suggested_reps: int = Field(..., ge=0)
    confidence: ConfidenceTag
    reasoning: str
    baseline: Baseline
    adjustments: list[Adjustment] = Field(default_factory=list)
    muscle_readiness: float = Field(..., ge=1.0, le=10.0)
    exercise_fatigue_rate: float = Field(..., ge=0.0, le=1.0)
    fatigue_alert: Optional[FatigueAlert] = None
    degraded_sources: list[str] = Field(default_factory=list)


class SetRecommendationRequest(BaseModel):
    """Body of a set recommendation request."""

    exercise_id: str
    set_number: int = Field(..., ge=1)
    target_reps: int = Field(..., ge=1)
    target_rpe: Optional[float] = Field(None, ge=0.0, le=10.0)
    prescribed_weight: Optional[float] = Field(None, ge=0.0)
    completed_session_sets: list[SetRecord] = Field(default_factory=list)
