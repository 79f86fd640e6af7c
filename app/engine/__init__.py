"""Recovery and readiness models: pure computations plus cache and degradation policy."""

from app.engine.acwr import ACWRConfig, compute_acwr
from app.engine.cache import InMemoryModelStore, ModelCache
from app.engine.degradation import DegradationPolicy
from app.engine.errors import EngineError, OutOfOrderSessionError, StorageUnavailableError
from app.engine.fitness_fatigue import FitnessFatigueConfig, LoadSeries, fold, replay
from app.engine.hierarchical import HierarchicalConfig, build_hierarchical_model
from app.engine.recommendation import RecommendationConfig, recommend_set, resolve_baseline
from app.engine.recovery_curve import RecoveryConfig, recovery_percentage
from app.engine.readiness import score_readiness
from app.engine.session_fatigue import SessionFatigueConfig, assess_session_fatigue

__all__ = [
    "ACWRConfig",
    "compute_acwr",
    "InMemoryModelStore",
    "ModelCache",
    "DegradationPolicy",
    "EngineError",
    "OutOfOrderSessionError",
    "StorageUnavailableError",
    "FitnessFatigueConfig",
    "LoadSeries",
    "fold",
    "replay",
    "HierarchicalConfig",
    "build_hierarchical_model",
    "RecommendationConfig",
    "recommend_set",
    "resolve_baseline",
    "RecoveryConfig",
    "recovery_percentage",
    "score_readiness",
    "SessionFatigueConfig",
    "assess_session_fatigue",
]
