"""
SQL-backed storage collaborator.

:class:`SqlStore` implements both
:class:`~app.engine.storage.HistoryStore` and
:class:`~app.engine.storage.ModelStore` on top of one SQLModel session.
Every ``SQLAlchemyError`` is rolled back and re-raised as
:class:`~app.engine.errors.StorageUnavailableError`, which the engine's
degradation policy knows how to absorb.
"""

from __future__ import annotations

import datetime
import functools
import logging
from typing import Callable, Optional, Sequence

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.clock import utcnow
from app.db.repositories.fatigue_history import FatigueHistoryRepository
from app.db.repositories.model_cache import ModelCacheRepository
from app.db.repositories.workout_session import WorkoutSessionRepository
from app.engine.errors import StorageUnavailableError
from app.models.fatigue_history import FatigueHistory
from app.models.set_log import SetLog
from app.models.workout_session import WorkoutSession
from app.schemas.model_cache import CachedModel, ModelKind, cached_model_adapter
from app.schemas.muscle_group import MuscleGroup
from app.schemas.recovery import FatigueSnapshot
from app.schemas.workout import SessionRecord, SetRecord

logger = logging.getLogger(__name__)


def _storage_operation(func):
    """Translate SQLAlchemy failures into StorageUnavailableError."""

    @functools.wraps(func)
    def wrapper(self: "SqlStore", *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageUnavailableError(func.__name__, str(exc)) from exc

    return wrapper


def _to_set_record(row: SetLog) -> SetRecord:
    return SetRecord(
        exercise_id=row.exercise_id,
        set_index=row.set_index,
        prescribed_reps=row.prescribed_reps,
        prescribed_rpe=row.prescribed_rpe,
        actual_weight=row.actual_weight,
        actual_reps=row.actual_reps,
        actual_rpe=row.actual_rpe,
        actual_rir=row.actual_rir,
        completed=row.completed,
        reached_failure=row.reached_failure,
        form_breakdown=row.form_breakdown,
        timestamp=row.timestamp,
    )


def _to_set_log(record: SetRecord) -> SetLog:
    return SetLog(
        session_id=0,
        exercise_id=record.exercise_id,
        set_index=record.set_index,
        prescribed_reps=record.prescribed_reps,
        prescribed_rpe=record.prescribed_rpe,
        actual_weight=record.actual_weight,
        actual_reps=record.actual_reps,
        actual_rpe=record.actual_rpe,
        actual_rir=record.actual_rir,
        completed=record.completed,
        reached_failure=record.reached_failure,
        form_breakdown=record.form_breakdown,
        timestamp=record.timestamp,
    )


def _to_snapshot(row: FatigueHistory) -> FatigueSnapshot:
    return FatigueSnapshot(
        athlete_id=row.athlete_id,
        session_id=row.session_key,
        muscle_group=MuscleGroup(row.muscle_group),
        fatigue_score=row.fatigue_score,
        rpe_overshoot_avg=row.rpe_overshoot_avg,
        form_breakdown_count=row.form_breakdown_count,
        failure_count=row.failure_count,
        volume_load=row.volume_load,
        recorded_at=row.recorded_at,
    )


class SqlStore:
    """History and model-cache store backed by a SQLModel session."""

    def __init__(self, session: Session, clock: Callable[[], datetime.datetime] = utcnow):
        self.session = session
        self.clock = clock
        self.workouts = WorkoutSessionRepository(session)
        self.fatigue = FatigueHistoryRepository(session)
        self.models = ModelCacheRepository(session)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @_storage_operation
    def save_session(self, athlete_id: str, record: SessionRecord) -> bool:
        """Persist *record* unless a session with the same id exists.  Returns True if inserted."""
        if self.workouts.get_by_key(athlete_id, record.session_id) is not None:
            return False
        entry = WorkoutSession(
            athlete_id=athlete_id,
            session_key=record.session_id,
            started_at=record.started_at,
            ended_at=record.ended_at,
            total_load=record.total_load,
        )
        self.workouts.create(entry, [_to_set_log(s) for s in record.sets])
        return True

    @_storage_operation
    def list_sessions(self, athlete_id: str, since: datetime.datetime) -> list[SessionRecord]:
        entries = self.workouts.list_since(athlete_id, since)
        sets = self.workouts.sets_for([e.id for e in entries])
        return [
            SessionRecord(
                session_id=e.session_key,
                started_at=e.started_at,
                ended_at=e.ended_at,
                total_load=e.total_load,
                sets=[_to_set_record(row) for row in sets.get(e.id, [])],
            )
            for e in entries
        ]

    @_storage_operation
    def list_recent_fatigue_snapshots(
        self, athlete_id: str, muscle_group: MuscleGroup, limit: int,
    ) -> list[FatigueSnapshot]:
        rows = self.fatigue.list_recent(athlete_id, MuscleGroup(muscle_group).value, limit)
        return [_to_snapshot(row) for row in rows]

    @_storage_operation
    def append_fatigue_snapshots(self, athlete_id: str, snapshots: Sequence[FatigueSnapshot]) -> None:
        self.fatigue.add_many([
            FatigueHistory(
                athlete_id=athlete_id,
                session_key=s.session_id,
                muscle_group=s.muscle_group.value,
                fatigue_score=s.fatigue_score,
                rpe_overshoot_avg=s.rpe_overshoot_avg,
                form_breakdown_count=s.form_breakdown_count,
                failure_count=s.failure_count,
                volume_load=s.volume_load,
                recorded_at=s.recorded_at,
            )
            for s in snapshots
        ])

    # ------------------------------------------------------------------
    # Model cache
    # ------------------------------------------------------------------

    @_storage_operation
    def get_cached_model(self, athlete_id: str, kind: ModelKind) -> Optional[CachedModel]:
        entry = self.models.get(athlete_id, kind.value)
        if entry is None or entry.expires_at <= self.clock():
            return None
        try:
            return cached_model_adapter.validate_python(entry.payload)
        except ValidationError:
            logger.warning("Discarding unreadable cached %s model for athlete %s", kind.value, athlete_id)
            return None

    @_storage_operation
    def put_cached_model(self, athlete_id: str, kind: ModelKind, model: CachedModel, ttl_seconds: int) -> None:
        now = self.clock()
        self.models.upsert(
            athlete_id,
            kind.value,
            model.model_dump(mode="json"),
            created_at=now,
            expires_at=now + datetime.timedelta(seconds=ttl_seconds),
        )

    @_storage_operation
    def invalidate(self, athlete_id: str) -> None:
        removed = self.models.delete_for_athlete(athlete_id)
        logger.debug("Removed %d cached models for athlete %s", removed, athlete_id)
