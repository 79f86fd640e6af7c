"""
Session fatigue — real-time, intra-workout fatigue detection.

Runs only on the completed sets of the in-progress session; it never
touches history or the model cache.

Score
-----
Four additive terms, clamped to 0–100:

    volume          = min(40, Σ weight×reps / 1000)
    rpe overshoot   = max(0, mean(actual RPE − prescribed RPE) × 10)
    form breakdown  = 10 × flagged sets
    failure         = 15 × unintentional failures

A failure is *unintentional* when the set reached failure at RPE <= 7 or
with no RPE logged at all: the athlete was not expecting to fail.

Severity
--------
Score thresholds are combined with count overrides, so a few bad sets
escalate regardless of the score:

    critical   score >= 85  or  form >= 3  or  failures >= 2
    high       score >= 70  or  form >= 2  or  failures >= 1
    moderate   score >= 55  or  overshoot >= 2
    mild       otherwise

An alert object exists only at score >= 60.  Below that the assessment
carries ``alert=None``, which is not the same as a zero-valued alert.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, Field

from app.schemas.muscle_group import MuscleGroup, MuscleGroupLookup
from app.schemas.session_fatigue import (
    FatigueAlert,
    FatigueIndicators,
    FatigueSeverity,
    SessionFatigueAssessment,
)
from app.schemas.workout import SetRecord

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================

_REDUCTION_PERCENT: dict[str, float] = {
    "critical": 25.0,
    "high": 15.0,
    "moderate": 10.0,
    "mild": 0.0,
}

_ALERT_MESSAGES: dict[str, str] = {
    "critical": "Critical fatigue detected. Consider stopping this exercise.",
    "high": "High fatigue accumulation. Reduce weight or take extra rest.",
    "moderate": "Moderate fatigue building up. Monitor closely.",
    "mild": "Fatigue is accumulating. Keep an eye on bar speed and form.",
}


class SessionFatigueConfig(BaseModel):
    """Weights and thresholds for the in-session fatigue score."""

    volume_divisor: float = Field(1000.0, gt=0.0)
    volume_cap: float = Field(40.0, ge=0.0)
    overshoot_weight: float = Field(10.0, ge=0.0)
    form_breakdown_weight: float = Field(10.0, ge=0.0)
    failure_weight: float = Field(15.0, ge=0.0)
    unintentional_failure_max_rpe: float = Field(7.0, description="Failure at or below this RPE is unplanned")

    critical_score: float = 85.0
    critical_form_breakdowns: int = 3
    critical_failures: int = 2
    high_score: float = 70.0
    high_form_breakdowns: int = 2
    high_failures: int = 1
    moderate_score: float = 55.0
    moderate_overshoot: float = 2.0

    alert_threshold: float = Field(60.0, ge=0.0, le=100.0)
    reduction_percent: dict[str, float] = Field(default_factory=lambda: dict(_REDUCTION_PERCENT))
    full_confidence_sets: int = Field(5, ge=1)


DEFAULT_SESSION_FATIGUE_CONFIG = SessionFatigueConfig()


# ======================================================================
# Indicators and score
# ======================================================================


def _completed(sets: Iterable[SetRecord]) -> list[SetRecord]:
    return [s for s in sets if s.completed]


def is_unintentional_failure(s: SetRecord, config: SessionFatigueConfig = DEFAULT_SESSION_FATIGUE_CONFIG) -> bool:
    if not s.reached_failure:
        return False
    rpe = s.effective_rpe
    return rpe is None or rpe <= config.unintentional_failure_max_rpe


def compute_indicators(
    sets: Iterable[SetRecord],
    config: SessionFatigueConfig = DEFAULT_SESSION_FATIGUE_CONFIG,
) -> FatigueIndicators:
    """Raw fatigue signals over the completed sets."""
    completed = _completed(sets)

    deviations = [
        s.effective_rpe - s.prescribed_rpe
        for s in completed
        if s.effective_rpe is not None and s.prescribed_rpe is not None
    ]
    overshoot = sum(deviations) / len(deviations) if deviations else 0.0

    return FatigueIndicators(
        rpe_overshoot=overshoot,
        form_breakdown=sum(1 for s in completed if s.form_breakdown),
        unintentional_failure=sum(1 for s in completed if is_unintentional_failure(s, config)),
        volume_accumulation=sum(s.volume for s in completed),
    )


def score_indicators(
    indicators: FatigueIndicators,
    config: SessionFatigueConfig = DEFAULT_SESSION_FATIGUE_CONFIG,
) -> float:
    """Combine indicators into the 0–100 fatigue score."""
    volume_term = min(config.volume_cap, indicators.volume_accumulation / config.volume_divisor)
    overshoot_term = max(0.0, indicators.rpe_overshoot * config.overshoot_weight)
    form_term = config.form_breakdown_weight * indicators.form_breakdown
    failure_term = config.failure_weight * indicators.unintentional_failure
    return max(0.0, min(100.0, volume_term + overshoot_term + form_term + failure_term))


def session_fatigue_score(
    sets: Iterable[SetRecord],
    config: SessionFatigueConfig = DEFAULT_SESSION_FATIGUE_CONFIG,
) -> float:
    """Fatigue score (0–100) of a group of sets."""
    return score_indicators(compute_indicators(sets, config), config)


# ======================================================================
# Severity
# ======================================================================


def _classify_severity(
    score: float,
    indicators: FatigueIndicators,
    config: SessionFatigueConfig = DEFAULT_SESSION_FATIGUE_CONFIG,
) -> FatigueSeverity:
    if (
        score >= config.critical_score
        or indicators.form_breakdown >= config.critical_form_breakdowns
        or indicators.unintentional_failure >= config.critical_failures
    ):
        return "critical"
    if (
        score >= config.high_score
        or indicators.form_breakdown >= config.high_form_breakdowns
        or indicators.unintentional_failure >= config.high_failures
    ):
        return "high"
    if score >= config.moderate_score or indicators.rpe_overshoot >= config.moderate_overshoot:
        return "moderate"
    return "mild"


def _build_reasoning(indicators: FatigueIndicators, score: float, severity: str) -> str:
    reasons: list[str] = []
    if indicators.form_breakdown > 0:
        reasons.append(f"{indicators.form_breakdown} sets with form breakdown")
    if indicators.unintentional_failure > 0:
        reasons.append(f"{indicators.unintentional_failure} unintentional failures")
    if indicators.rpe_overshoot >= 1.5:
        reasons.append(f"average RPE overshoot of {indicators.rpe_overshoot:.1f} points")
    if indicators.volume_accumulation > 50_000:
        reasons.append(f"high volume accumulation ({indicators.volume_accumulation / 1000:.0f}K)")

    if not reasons:
        return f"Fatigue score: {score:.0f}/100 ({severity})"
    return f"{severity.capitalize()} fatigue detected: {', '.join(reasons)}"


def affected_muscles(sets: Iterable[SetRecord], muscle_lookup: Optional[MuscleGroupLookup]) -> list[MuscleGroup]:
    """Muscle groups trained by *sets*, in first-seen order."""
    if muscle_lookup is None:
        return []
    seen: list[MuscleGroup] = []
    for s in sets:
        for muscle in muscle_lookup(s.exercise_id):
            if muscle not in seen:
                seen.append(muscle)
    return seen


# ======================================================================
# Main entry point
# ======================================================================


def build_alert(
    score: float,
    severity: FatigueSeverity,
    muscles: Sequence[MuscleGroup],
    config: SessionFatigueConfig = DEFAULT_SESSION_FATIGUE_CONFIG,
) -> Optional[FatigueAlert]:
    """Alert for *score*, or ``None`` below the alert threshold."""
    if score < config.alert_threshold:
        return None
    return FatigueAlert(
        severity=severity,
        message=_ALERT_MESSAGES[severity],
        suggested_reduction=config.reduction_percent.get(severity, 0.0) / 100.0,
        affected_muscles=list(muscles),
    )


def assess_session_fatigue(
    sets: Iterable[SetRecord],
    muscle_lookup: Optional[MuscleGroupLookup] = None,
    config: SessionFatigueConfig = DEFAULT_SESSION_FATIGUE_CONFIG,
) -> SessionFatigueAssessment:
    """Assess fatigue of the current session from its completed sets."""
    completed = _completed(sets)

    if not completed:
        return SessionFatigueAssessment(
            overall_fatigue=0.0,
            severity="mild",
            should_reduce_weight=False,
            reduction_percent=0.0,
            affected_muscles=[],
            reasoning="No sets completed yet",
            indicators=FatigueIndicators(),
            confidence=1.0,
            alert=None,
        )

    indicators = compute_indicators(completed, config)
    score = score_indicators(indicators, config)
    severity = _classify_severity(score, indicators, config)
    muscles = affected_muscles(completed, muscle_lookup)
    alert = build_alert(score, severity, muscles, config)

    if alert is not None:
        logger.debug("Session fatigue alert: severity=%s score=%.1f", severity, score)

    return SessionFatigueAssessment(
        overall_fatigue=round(score, 1),
        severity=severity,
        should_reduce_weight=severity in ("high", "critical"),
        reduction_percent=config.reduction_percent.get(severity, 0.0),
        affected_muscles=muscles,
        reasoning=_build_reasoning(indicators, score, severity),
        indicators=indicators,
        confidence=min(1.0, len(completed) / config.full_confidence_sets),
        alert=alert,
    )
