"""
Base database configuration.

Import all models here so Alembic can detect them for migrations.
"""

# Import all models for Alembic autogenerate
from app.models.workout_session import WorkoutSession  # noqa: F401
from app.models.set_log import SetLog  # noqa: F401
from app.models.fatigue_history import FatigueHistory  # noqa: F401
from app.models.model_cache import CachedModelEntry  # noqa: F401
