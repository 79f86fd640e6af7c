"""SQLModel database models."""

from app.models.workout_session import WorkoutSession
from app.models.set_log import SetLog
from app.models.fatigue_history import FatigueHistory
from app.models.model_cache import CachedModelEntry

__all__ = [
    "WorkoutSession",
    "SetLog",
    "FatigueHistory",
    "CachedModelEntry",
]
