"""
Fitness-fatigue (Banister) state.

    fitness'  = fitness · exp(−Δd/τ1) + k1 · load
    fatigue'  = fatigue · exp(−Δd/τ2) + k2 · load
    net       = fitness − fatigue

``performance_score`` maps ``net`` onto 0–100 for display.
"""

from __future__ import annotations

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class FitnessFatigueState(BaseModel):
    """Running two-factor state.  Cached payload for the ``fitness_fatigue`` kind."""

    kind: Literal["fitness_fatigue"] = "fitness_fatigue"
    fitness: float = Field(0.0, ge=0.0)
    fatigue: float = Field(0.0, ge=0.0)
    net_performance: float = 0.0
    performance_score: float = Field(..., ge=0.0, le=100.0)
    last_session_at: Optional[datetime.datetime] = None
    sessions_processed: int = Field(0, ge=0)
