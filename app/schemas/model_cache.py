"""
Tagged payloads for the per-athlete model cache.

Every cached model carries a ``kind`` literal so that payloads read back
from storage are validated into the right type.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Union

from pydantic import Field, TypeAdapter

from app.schemas.acwr import ACWRResult
from app.schemas.fitness_fatigue import FitnessFatigueState
from app.schemas.hierarchical import HierarchicalFatigueModel
from app.schemas.recovery import RecoveryStateSet


class ModelKind(str, Enum):
    ACWR = "acwr"
    FITNESS_FATIGUE = "fitness_fatigue"
    HIERARCHICAL = "hierarchical"
    RECOVERY_PROFILES = "recovery_profiles"


CachedModel = Annotated[
    Union[ACWRResult, FitnessFatigueState, HierarchicalFatigueModel, RecoveryStateSet],
    Field(discriminator="kind"),
]

cached_model_adapter: TypeAdapter[CachedModel] = TypeAdapter(CachedModel)
