"""
Workout history records.

:class:`SetRecord` and :class:`SessionRecord` are produced by the external
logging collaborator and are read-only to the engine, so both models are
frozen.  Timestamps are naive UTC; offset-aware values are converted on
the way in.
"""

from __future__ import annotations

import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from app.core.clock import as_naive_utc

UtcDatetime = Annotated[datetime.datetime, AfterValidator(as_naive_utc)]


class SetRecord(BaseModel):
    """A single logged set."""

    model_config = ConfigDict(frozen=True)

    exercise_id: str = Field(..., description="Exercise slug, e.g. 'bench_press'")
    set_index: int = Field(0, ge=0, description="Position of the set within the exercise")
    prescribed_reps: Optional[int] = Field(None, ge=0)
    prescribed_rpe: Optional[float] = Field(None, ge=0.0, le=10.0)
    actual_weight: Optional[float] = Field(None, ge=0.0)
    actual_reps: Optional[int] = Field(None, ge=0)
    actual_rpe: Optional[float] = Field(None, ge=0.0, le=10.0)
    actual_rir: Optional[float] = Field(None, ge=0.0, le=10.0)
    completed: bool = True
    reached_failure: bool = False
    form_breakdown: bool = False
    timestamp: Optional[UtcDatetime] = None

    @property
    def effective_rpe(self) -> Optional[float]:
        """Actual RPE, or ``10 - RIR`` when only reps-in-reserve was logged."""
        if self.actual_rpe is not None:
            return self.actual_rpe
        if self.actual_rir is not None:
            return max(0.0, 10.0 - self.actual_rir)
        return None

    @property
    def volume(self) -> float:
        """Weight x reps (0 when either is missing)."""
        return (self.actual_weight or 0.0) * (self.actual_reps or 0)


class SessionRecord(BaseModel):
    """One physical workout: an ordered sequence of sets."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    started_at: UtcDatetime
    ended_at: Optional[UtcDatetime] = Field(None, description="Set once the workout is completed")
    sets: list[SetRecord] = Field(default_factory=list)
    total_load: Optional[float] = Field(None, ge=0.0, description="Recorded total volume load, if any")

    @property
    def performed_at(self) -> datetime.datetime:
        return self.ended_at or self.started_at

    @property
    def is_completed(self) -> bool:
        return self.ended_at is not None

    def completed_sets(self) -> list[SetRecord]:
        return [s for s in self.sets if s.completed]
