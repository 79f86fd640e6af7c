"""
In-session fatigue assessment schemas.

The fatigue alert is optional: below the alert threshold the assessment
carries ``alert=None``, which callers must treat differently from an
alert that is present.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.muscle_group import MuscleGroup
from app.schemas.workout import SetRecord

FatigueSeverity = Literal["mild", "moderate", "high", "critical"]


class FatigueIndicators(BaseModel):
    """Raw signals the fatigue score is built from."""

    rpe_overshoot: float = Field(0.0, description="Mean (actual − prescribed) RPE")
    form_breakdown: int = Field(0, ge=0, description="Sets flagged with form breakdown")
    unintentional_failure: int = Field(0, ge=0, description="Failures at RPE <= 7 or without RPE")
    volume_accumulation: float = Field(0.0, ge=0.0, description="Total weight x reps this session")


class FatigueAlert(BaseModel):
    """Mid-workout fatigue alert."""

    severity: FatigueSeverity
    message: str
    suggested_reduction: float = Field(..., ge=0.0, le=1.0)
    affected_muscles: list[MuscleGroup] = Field(default_factory=list)


class SessionFatigueAssessment(BaseModel):
    """Real-time fatigue state of the in-progress session."""

    overall_fatigue: float = Field(..., ge=0.0, le=100.0)
    severity: FatigueSeverity
    should_reduce_weight: bool
    reduction_percent: float = Field(..., ge=0.0, le=100.0)
    affected_muscles: list[MuscleGroup] = Field(default_factory=list)
    reasoning: str
    indicators: FatigueIndicators
    confidence: float = Field(..., ge=0.0, le=1.0)
    alert: Optional[FatigueAlert] = None


class SessionFatigueRequest(BaseModel):
    """Body of a session fatigue request: the sets completed so far."""

    completed_session_sets: list[SetRecord] = Field(default_factory=list)
