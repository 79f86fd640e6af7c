"""
Fatigue history database model.

Append-only log of per-muscle fatigue snapshots, one row per
(athlete, session, muscle group).  Read back as the chronic-fatigue
input of the readiness scorer.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class FatigueHistory(SQLModel, table=True):
    """Fatigue snapshot of one muscle group after one session."""

    __tablename__ = "fatigue_history"

    id: Optional[int] = Field(default=None, primary_key=True)
    athlete_id: str = Field(nullable=False, max_length=64, index=True)
    session_key: str = Field(nullable=False, max_length=64)
    muscle_group: str = Field(nullable=False, max_length=32, index=True)

    fatigue_score: float = Field(nullable=False)
    rpe_overshoot_avg: Optional[float] = Field(default=None)
    form_breakdown_count: int = Field(default=0, nullable=False)
    failure_count: int = Field(default=0, nullable=False)
    volume_load: float = Field(default=0.0, nullable=False)

    recorded_at: datetime.datetime = Field(nullable=False, index=True)
