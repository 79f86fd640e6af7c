"""
Set log database model.

Immutable once written: the engine only reads these rows.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class SetLog(SQLModel, table=True):
    """A single logged set within a workout session."""

    __tablename__ = "set_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="workout_sessions.id", nullable=False, index=True)
    exercise_id: str = Field(nullable=False, max_length=100, index=True)
    set_index: int = Field(default=0, nullable=False)

    prescribed_reps: Optional[int] = Field(default=None)
    prescribed_rpe: Optional[float] = Field(default=None)
    actual_weight: Optional[float] = Field(default=None)
    actual_reps: Optional[int] = Field(default=None)
    actual_rpe: Optional[float] = Field(default=None)
    actual_rir: Optional[float] = Field(default=None)

    completed: bool = Field(default=True, nullable=False)
    reached_failure: bool = Field(default=False, nullable=False)
    form_breakdown: bool = Field(default=False, nullable=False)
    timestamp: Optional[datetime.datetime] = Field(default=None)
