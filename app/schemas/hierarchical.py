"""
Hierarchical fatigue model schemas.

Each exercise gets a baseline fatigue rate (fraction of performance lost
per set) learned from the athlete's own set sequences and shrunk toward
the population rate.  ``sample_size`` counts the sessions that produced a
usable estimate and gates confidence.
"""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, Field

POPULATION_FATIGUE_RATE = 0.15


class ExerciseFatigueFactor(BaseModel):
    """Fatigue profile of a single exercise."""

    baseline_fatigue_rate: float = Field(..., ge=0.0, le=1.0)
    sample_size: int = Field(0, ge=0)
    set_count: int = Field(0, ge=0)


class HierarchicalFatigueModel(BaseModel):
    """Per-athlete exercise → fatigue-rate mapping.  Cached payload for the ``hierarchical`` kind."""

    kind: Literal["hierarchical"] = "hierarchical"
    population_rate: float = POPULATION_FATIGUE_RATE
    min_sample_size: int = 3
    exercises: dict[str, ExerciseFatigueFactor] = Field(default_factory=dict)
    total_sessions: int = Field(0, ge=0)
    total_sets: int = Field(0, ge=0)
    built_at: datetime.datetime

    def factor_for(self, exercise_id: str) -> ExerciseFatigueFactor:
        """Factor for *exercise_id*; the population default when never seen."""
        factor = self.exercises.get(exercise_id)
        if factor is None:
            return ExerciseFatigueFactor(baseline_fatigue_rate=self.population_rate, sample_size=0)
        return factor

    def is_confident(self, exercise_id: str) -> bool:
        return self.factor_for(exercise_id).sample_size >= self.min_sample_size
