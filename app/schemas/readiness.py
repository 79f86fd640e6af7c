"""
Pre-workout readiness schema.

Combines the longitudinal models (ACWR, fitness-fatigue) with the
per-muscle recovery profiles into a single 1–10 readiness result.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.acwr import ACWRStatus
from app.schemas.recovery import MuscleReadiness


class PreWorkoutReadiness(BaseModel):
    """Readiness result returned before a workout."""

    overall_score: float = Field(..., ge=1.0, le=10.0)
    overall_status: Literal["excellent", "good", "moderate", "poor"]
    acwr: float = Field(..., ge=0.0)
    acwr_status: ACWRStatus
    fitness_score: float = Field(..., ge=0.0)
    fatigue_score: float = Field(..., ge=0.0)
    performance_score: float = Field(..., ge=0.0, le=100.0)
    muscle_readiness: list[MuscleReadiness] = Field(
        default_factory=list,
        description="Least-ready muscle first",
    )
    warnings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    degraded_sources: list[str] = Field(default_factory=list)
