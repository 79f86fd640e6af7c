"""
Workout session repository.

Handles database operations for :class:`WorkoutSession` and its
:class:`SetLog` rows.
"""

import datetime
from collections import defaultdict
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.set_log import SetLog
from app.models.workout_session import WorkoutSession


class WorkoutSessionRepository:
    """Repository for WorkoutSession database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry: WorkoutSession, sets: list[SetLog]) -> WorkoutSession:
        self.session.add(entry)
        self.session.flush()
        for s in sets:
            s.session_id = entry.id
            self.session.add(s)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def get_by_key(self, athlete_id: str, session_key: str) -> Optional[WorkoutSession]:
        statement = select(WorkoutSession).where(
            WorkoutSession.athlete_id == athlete_id, WorkoutSession.session_key == session_key,
        )
        return self.session.exec(statement).first()

    def list_since(self, athlete_id: str, since: datetime.datetime) -> list[WorkoutSession]:
        """Sessions performed at or after *since*, oldest first."""
        performed_at = func.coalesce(WorkoutSession.ended_at, WorkoutSession.started_at)
        statement = (
            select(WorkoutSession)
            .where(WorkoutSession.athlete_id == athlete_id, performed_at >= since)
            .order_by(performed_at, WorkoutSession.id)
        )
        return list(self.session.exec(statement).all())

    def sets_for(self, session_ids: list[int]) -> dict[int, list[SetLog]]:
        """Set logs grouped by session id, ordered by set index."""
        if not session_ids:
            return {}
        statement = (
            select(SetLog)
            .where(SetLog.session_id.in_(session_ids))
            .order_by(SetLog.session_id, SetLog.set_index, SetLog.id)
        )
        grouped: dict[int, list[SetLog]] = defaultdict(list)
        for row in self.session.exec(statement).all():
            grouped[row.session_id].append(row)
        return grouped
