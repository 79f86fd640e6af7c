"""Database repositories."""

from app.db.repositories.workout_session import WorkoutSessionRepository
from app.db.repositories.fatigue_history import FatigueHistoryRepository
from app.db.repositories.model_cache import ModelCacheRepository

__all__ = [
    "WorkoutSessionRepository",
    "FatigueHistoryRepository",
    "ModelCacheRepository",
]
