"""
Storage collaborator protocols.

The engine never talks to a database directly: history and cached models
come through these two interfaces.  Implementations raise
:class:`~app.engine.errors.StorageUnavailableError` when the backing
store cannot be reached.
"""

from __future__ import annotations

import datetime
from collections import defaultdict
from typing import Optional, Protocol, Sequence

from app.schemas.model_cache import CachedModel, ModelKind
from app.schemas.muscle_group import MuscleGroup
from app.schemas.recovery import FatigueSnapshot
from app.schemas.workout import SessionRecord


class HistoryStore(Protocol):
    def list_sessions(self, athlete_id: str, since: datetime.datetime) -> Sequence[SessionRecord]:
        """Sessions performed at or after *since*, oldest first."""
        ...

    def list_recent_fatigue_snapshots(
        self, athlete_id: str, muscle_group: MuscleGroup, limit: int,
    ) -> Sequence[FatigueSnapshot]:
        """Up to *limit* snapshots for *muscle_group*, most recent first."""
        ...

    def append_fatigue_snapshots(self, athlete_id: str, snapshots: Sequence[FatigueSnapshot]) -> None:
        ...


class ModelStore(Protocol):
    def get_cached_model(self, athlete_id: str, kind: ModelKind) -> Optional[CachedModel]:
        """Cached model of *kind*, or ``None`` when absent or expired."""
        ...

    def put_cached_model(self, athlete_id: str, kind: ModelKind, model: CachedModel, ttl_seconds: int) -> None:
        ...

    def invalidate(self, athlete_id: str) -> None:
        """Drop every cached model of *athlete_id*."""
        ...


class InMemoryHistoryStore:
    """Dict-backed :class:`HistoryStore`, used by scripts and tests."""

    def __init__(self) -> None:
        self._sessions: dict[str, list[SessionRecord]] = defaultdict(list)
        self._snapshots: dict[str, list[FatigueSnapshot]] = defaultdict(list)

    def add_session(self, athlete_id: str, session: SessionRecord) -> None:
        self._sessions[athlete_id].append(session)

    def list_sessions(self, athlete_id: str, since: datetime.datetime) -> list[SessionRecord]:
        sessions = [s for s in self._sessions.get(athlete_id, []) if s.performed_at >= since]
        return sorted(sessions, key=lambda s: s.performed_at)

    def list_recent_fatigue_snapshots(
        self, athlete_id: str, muscle_group: MuscleGroup, limit: int,
    ) -> list[FatigueSnapshot]:
        matching = [s for s in self._snapshots.get(athlete_id, []) if s.muscle_group == muscle_group]
        matching.sort(key=lambda s: s.recorded_at, reverse=True)
        return matching[:limit]

    def append_fatigue_snapshots(self, athlete_id: str, snapshots: Sequence[FatigueSnapshot]) -> None:
        self._snapshots[athlete_id].extend(snapshots)
