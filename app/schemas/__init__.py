"""Pydantic schemas for records, model state and engine results."""

from app.schemas.acwr import ACWRResult, LoadPoint
from app.schemas.fitness_fatigue import FitnessFatigueState
from app.schemas.hierarchical import ExerciseFatigueFactor, HierarchicalFatigueModel
from app.schemas.model_cache import CachedModel, ModelKind
from app.schemas.muscle_group import MuscleGroup
from app.schemas.readiness import PreWorkoutReadiness
from app.schemas.recommendation import Adjustment, Baseline, SetRecommendation
from app.schemas.recovery import (
    FatigueSnapshot,
    MuscleReadiness,
    MuscleTrainingState,
    RecoveryProfile,
    RecoveryStateSet,
)
from app.schemas.session_fatigue import FatigueAlert, FatigueIndicators, SessionFatigueAssessment
from app.schemas.workout import SessionRecord, SetRecord

__all__ = [
    "ACWRResult",
    "LoadPoint",
    "FitnessFatigueState",
    "ExerciseFatigueFactor",
    "HierarchicalFatigueModel",
    "CachedModel",
    "ModelKind",
    "MuscleGroup",
    "PreWorkoutReadiness",
    "Adjustment",
    "Baseline",
    "SetRecommendation",
    "FatigueSnapshot",
    "MuscleReadiness",
    "MuscleTrainingState",
    "RecoveryProfile",
    "RecoveryStateSet",
    "FatigueAlert",
    "FatigueIndicators",
    "SessionFatigueAssessment",
    "SessionRecord",
    "SetRecord",
]
