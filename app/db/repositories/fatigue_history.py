"""
Fatigue history repository.

Append-only: rows are inserted and read, never updated.
"""

from sqlmodel import Session, select

from app.models.fatigue_history import FatigueHistory


class FatigueHistoryRepository:
    """Repository for FatigueHistory database operations."""

    def __init__(self, session: Session):
        self.session = session

    def add_many(self, entries: list[FatigueHistory]) -> None:
        self.session.add_all(entries)
        self.session.commit()

    def list_recent(self, athlete_id: str, muscle_group: str, limit: int) -> list[FatigueHistory]:
        statement = (
            select(FatigueHistory)
            .where(FatigueHistory.athlete_id == athlete_id, FatigueHistory.muscle_group == muscle_group)
            .order_by(FatigueHistory.recorded_at.desc(), FatigueHistory.id.desc())
            .limit(limit)
        )
        return list(self.session.exec(statement).all())
