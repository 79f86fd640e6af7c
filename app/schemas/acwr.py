"""
ACWR (Acute:Chronic Workload Ratio) schemas.

Status labels (inclusive upper bounds):

- ``detraining``     — ACWR < 0.8
- ``optimal``        — 0.8 <= ACWR <= 1.3
- ``building``       — 1.3 < ACWR <= 1.5
- ``high_risk``      — 1.5 < ACWR <= 2.0
- ``critical_risk``  — ACWR > 2.0
- ``unknown``        — insufficient history, ratio reported as neutral 1.0
"""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, Field

ACWRStatus = Literal["detraining", "optimal", "building", "high_risk", "critical_risk", "unknown"]


class LoadPoint(BaseModel):
    """A single (date, training load) observation."""

    on: datetime.datetime
    load: float = Field(..., ge=0.0)


class ACWRResult(BaseModel):
    """Acute:chronic workload state.  Cached payload for the ``acwr`` kind."""

    kind: Literal["acwr"] = "acwr"
    acwr: float = Field(..., ge=0.0, description="Ratio (1.0 when history is insufficient)")
    status: ACWRStatus
    acute_load: float = Field(..., ge=0.0, description="Load summed over the acute window")
    chronic_load: float = Field(..., ge=0.0, description="Chronic weekly average load")
    training_monotony: float = Field(1.0, ge=0.0)
    training_strain: float = Field(0.0, ge=0.0)
    sessions_in_window: int = Field(0, ge=0)
    has_sufficient_history: bool
    recommendation: str
    as_of: datetime.datetime
