"""
Model cache repository.

One row per (athlete, model kind); writes replace the existing row.
"""

import datetime
from typing import Optional

from sqlmodel import Session, select

from app.models.model_cache import CachedModelEntry


class ModelCacheRepository:
    """Repository for CachedModelEntry database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, athlete_id: str, model_kind: str) -> Optional[CachedModelEntry]:
        statement = select(CachedModelEntry).where(
            CachedModelEntry.athlete_id == athlete_id, CachedModelEntry.model_kind == model_kind,
        )
        return self.session.exec(statement).first()

    def upsert(
        self,
        athlete_id: str,
        model_kind: str,
        payload: dict,
        created_at: datetime.datetime,
        expires_at: datetime.datetime,
    ) -> CachedModelEntry:
        entry = self.get(athlete_id, model_kind)
        if entry is None:
            entry = CachedModelEntry(athlete_id=athlete_id, model_kind=model_kind, payload=payload,
                                     created_at=created_at, expires_at=expires_at)
        else:
            entry.payload = payload
            entry.created_at = created_at
            entry.expires_at = expires_at
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def delete_for_athlete(self, athlete_id: str) -> int:
        statement = select(CachedModelEntry).where(CachedModelEntry.athlete_id == athlete_id)
        entries = list(self.session.exec(statement).all())
        for entry in entries:
            self.session.delete(entry)
        self.session.commit()
        return len(entries)
