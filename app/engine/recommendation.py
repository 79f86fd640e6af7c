"""
Set recommendation — fixed-order adjustment pipeline.

1. Resolve a baseline weight:
   a. last completed set of the exercise in the current session  → historical
   b. best E1RM in recent history, converted to the target reps/RPE → historical
   c. caller-supplied prescribed weight                           → prescribed
   d. configured default                                          → default
2. Muscle readiness: average < 6        → cut (7 − avg) × 5 %
3. ACWR: ratio > 1.5                    → cut (acwr − 1.3) × 10 %
4. Session fatigue: score > 60          → cut (score − 50) × 0.3 %
5. Exercise fatigue rate: rate > 0.18   → cut (rate − 0.15) × 0.5

Each cut is capped at 50 % and multiplied into the running weight, so the
adjustments compound in this order rather than averaging.  Every applied
cut is recorded with its reason.

Confidence: ``low`` from a default baseline, ``high`` from a historical
baseline with at most two adjustments, ``medium`` otherwise; one level
lower when any input model was degraded.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, Field

from app.engine.one_rep_max import best_one_rep_max, weight_for_reps
from app.schemas.recommendation import Adjustment, Baseline, ConfidenceTag, SetRecommendation
from app.schemas.session_fatigue import FatigueAlert
from app.schemas.workout import SetRecord

# ======================================================================
# Configuration
# ======================================================================


class RecommendationConfig(BaseModel):
    """Thresholds and slopes of the adjustment pipeline."""

    readiness_threshold: float = 6.0
    readiness_pivot: float = 7.0
    readiness_step: float = Field(0.05, description="Cut per readiness point below the pivot")

    acwr_threshold: float = 1.5
    acwr_pivot: float = 1.3
    acwr_step: float = Field(0.10, description="Cut per ACWR unit above the pivot")

    session_fatigue_threshold: float = 60.0
    session_fatigue_pivot: float = 50.0
    session_fatigue_step: float = Field(0.003, description="Cut per fatigue point above the pivot")

    exercise_rate_threshold: float = 0.18
    exercise_rate_pivot: float = 0.15
    exercise_rate_step: float = 0.5

    max_single_reduction: float = Field(0.5, gt=0.0, le=1.0)
    default_weight: float = Field(135.0, ge=0.0)
    default_readiness: float = Field(7.0, ge=1.0, le=10.0)
    max_adjustments_for_high: int = 2


DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()

_DOWNGRADE: dict[str, ConfidenceTag] = {"high": "medium", "medium": "low", "low": "low"}


def _round_weight(weight: float) -> float:
    return round(max(0.0, weight), 1)


# ======================================================================
# Baseline
# ======================================================================


def resolve_baseline(
    exercise_id: str,
    target_reps: int,
    target_rpe: Optional[float] = None,
    session_sets: Sequence[SetRecord] = (),
    history_sets: Iterable[SetRecord] = (),
    prescribed_weight: Optional[float] = None,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> Baseline:
    """Resolve the starting weight for the next set of *exercise_id*."""
    for s in reversed(session_sets):
        if s.exercise_id == exercise_id and s.completed and s.actual_weight:
            return Baseline(
                source="historical",
                weight=_round_weight(s.actual_weight),
                reps=s.actual_reps or target_reps,
            )

    best = best_one_rep_max(history_sets, exercise_id)
    if best is not None:
        weight = weight_for_reps(best, target_reps, target_rpe)
        if weight > 0:
            return Baseline(source="historical", weight=_round_weight(weight), reps=target_reps)

    if prescribed_weight is not None and prescribed_weight > 0:
        return Baseline(source="prescribed", weight=_round_weight(prescribed_weight), reps=target_reps)

    return Baseline(source="default", weight=_round_weight(config.default_weight), reps=target_reps)


# ======================================================================
# Adjustments
# ======================================================================


def _readiness_cut(readiness: float, config: RecommendationConfig) -> Optional[Adjustment]:
    if readiness >= config.readiness_threshold:
        return None
    cut = (config.readiness_pivot - readiness) * config.readiness_step
    return Adjustment(
        factor="muscle_readiness",
        adjustment=-cut,
        reason=f"Target muscles are not fully recovered (readiness {readiness:.1f}/10)",
    )


def _acwr_cut(acwr: float, config: RecommendationConfig) -> Optional[Adjustment]:
    if acwr <= config.acwr_threshold:
        return None
    cut = (acwr - config.acwr_pivot) * config.acwr_step
    return Adjustment(
        factor="acwr_overreach",
        adjustment=-cut,
        reason=f"Training load spike (ACWR {acwr:.2f})",
    )


def _session_fatigue_cut(fatigue: float, config: RecommendationConfig) -> Optional[Adjustment]:
    if fatigue <= config.session_fatigue_threshold:
        return None
    cut = (fatigue - config.session_fatigue_pivot) * config.session_fatigue_step
    return Adjustment(
        factor="session_fatigue",
        adjustment=-cut,
        reason=f"Fatigue accumulated this session ({fatigue:.0f}/100)",
    )


def _exercise_rate_cut(rate: float, config: RecommendationConfig) -> Optional[Adjustment]:
    if rate <= config.exercise_rate_threshold:
        return None
    cut = (rate - config.exercise_rate_pivot) * config.exercise_rate_step
    return Adjustment(
        factor="exercise_fatigue",
        adjustment=-cut,
        reason=f"This exercise fatigues you faster than average ({rate:.0%} per set)",
    )


def _cap(adjustment: Adjustment, config: RecommendationConfig) -> Adjustment:
    capped = max(-config.max_single_reduction, adjustment.adjustment)
    return adjustment.model_copy(update={"adjustment": round(capped, 4)})


def confidence_for(
    baseline: Baseline,
    adjustments: Sequence[Adjustment],
    degraded: bool = False,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> ConfidenceTag:
    if baseline.source == "default":
        tag: ConfidenceTag = "low"
    elif baseline.source == "historical" and len(adjustments) <= config.max_adjustments_for_high:
        tag = "high"
    else:
        tag = "medium"
    return _DOWNGRADE[tag] if degraded else tag


def _build_reasoning(baseline: Baseline, adjustments: Sequence[Adjustment]) -> str:
    origin = {
        "historical": f"Based on your recent performance ({baseline.weight:g} x {baseline.reps})",
        "prescribed": f"Based on the prescribed weight ({baseline.weight:g})",
        "default": f"No history for this exercise yet, starting from {baseline.weight:g}",
    }[baseline.source]
    if not adjustments:
        return f"{origin}. No adjustments needed."
    parts = [f"{a.reason}: {a.adjustment * 100:+.1f}%" for a in adjustments]
    return f"{origin}. " + "; ".join(parts) + "."


# ======================================================================
# Main entry point
# ======================================================================


def recommend_set(
    exercise_id: str,
    set_number: int,
    target_reps: int,
    baseline: Baseline,
    muscle_readiness: Optional[float] = None,
    acwr: float = 1.0,
    session_fatigue: float = 0.0,
    exercise_fatigue_rate: float = 0.15,
    fatigue_alert: Optional[FatigueAlert] = None,
    degraded_sources: Sequence[str] = (),
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> SetRecommendation:
    """Apply the adjustment pipeline to *baseline*."""
    readiness = config.default_readiness if muscle_readiness is None else muscle_readiness

    candidates = (
        _readiness_cut(readiness, config),
        _acwr_cut(acwr, config),
        _session_fatigue_cut(session_fatigue, config),
        _exercise_rate_cut(exercise_fatigue_rate, config),
    )

    weight = baseline.weight
    adjustments: list[Adjustment] = []
    for candidate in candidates:
        if candidate is None:
            continue
        applied = _cap(candidate, config)
        weight *= 1.0 + applied.adjustment
        adjustments.append(applied)

    return SetRecommendation(
        exercise_id=exercise_id,
        set_number=set_number,
        suggested_weight=_round_weight(weight),
        suggested_reps=target_reps,
        confidence=confidence_for(baseline, adjustments, bool(degraded_sources), config),
        reasoning=_build_reasoning(baseline, adjustments),
        baseline=baseline,
        adjustments=adjustments,
        muscle_readiness=round(max(1.0, min(10.0, readiness)), 1),
        exercise_fatigue_rate=exercise_fatigue_rate,
        fatigue_alert=fatigue_alert,
        degraded_sources=list(degraded_sources),
    )
