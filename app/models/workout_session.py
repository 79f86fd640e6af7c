"""
Workout session database model.

One row per physical workout.  Sets live in :class:`~app.models.set_log.SetLog`.
"""

import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.core.clock import utcnow


class WorkoutSession(SQLModel, table=True):
    """A single workout logged by an athlete."""

    __tablename__ = "workout_sessions"
    __table_args__ = (UniqueConstraint("athlete_id", "session_key", name="uq_workout_athlete_session_key"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    athlete_id: str = Field(nullable=False, max_length=64, index=True)
    session_key: str = Field(nullable=False, max_length=64, description="Caller-assigned session id")

    started_at: datetime.datetime = Field(nullable=False, index=True)
    ended_at: Optional[datetime.datetime] = Field(default=None, index=True)
    total_load: Optional[float] = Field(default=None)

    created_at: datetime.datetime = Field(default_factory=utcnow)
