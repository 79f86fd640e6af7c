"""
Pre-workout advisor — combines the longitudinal models into one result.

Architecture (three layers):
    1. **ACWR** (guardrail) — detects load spikes / under-exposure
    2. **Fitness-fatigue** (trend) — sets the base score from net performance
    3. **Muscle readiness** (local) — averages in the per-muscle scores

Overall score
-------------
    base  = performance_score / 10          (7.0 when the model is unavailable)
    base −= (acwr − 1.3) × 2                when acwr > 1.5
    base −= (0.8 − acwr) × 2                when acwr < 0.8
    score = (base + mean muscle readiness) / 2   when any muscle is listed

clamped to [1, 10] with one decimal.  ACWR adjustments apply only when the
ratio is known.

Confidence is 0.25 per available longitudinal model (hierarchical,
fitness-fatigue, ACWR, recovery profiles).
"""

from __future__ import annotations

from typing import Optional, Sequence

from app.schemas.acwr import ACWRResult
from app.schemas.fitness_fatigue import FitnessFatigueState
from app.schemas.recovery import MuscleReadiness

DEFAULT_OVERALL_READINESS = 7.0
CONFIDENCE_PER_MODEL = 0.25

_STATUS_THRESHOLDS: list[tuple[str, float]] = [
    ("excellent", 8.0),
    ("good", 6.0),
    ("moderate", 4.0),
]


# ======================================================================
# Overall score
# ======================================================================


def _label_overall(score: float) -> str:
    for label, low in _STATUS_THRESHOLDS:
        if score >= low:
            return label
    return "poor"


def _compute_overall_score(
    acwr: Optional[ACWRResult],
    fitness_fatigue: Optional[FitnessFatigueState],
    muscles: Sequence[MuscleReadiness],
) -> float:
    if fitness_fatigue is not None:
        score = fitness_fatigue.performance_score / 10.0
    else:
        score = DEFAULT_OVERALL_READINESS

    if acwr is not None and acwr.has_sufficient_history:
        if acwr.acwr > 1.5:
            score -= (acwr.acwr - 1.3) * 2.0
        elif acwr.acwr < 0.8:
            score -= (0.8 - acwr.acwr) * 2.0

    if muscles:
        avg = sum(m.score for m in muscles) / len(muscles)
        score = (score + avg) / 2.0

    return round(max(1.0, min(10.0, score)), 1)


# ======================================================================
# Guidance text
# ======================================================================


def _generate_warnings(
    acwr: Optional[ACWRResult],
    performance: float,
    muscles: Sequence[MuscleReadiness],
) -> list[str]:
    warnings: list[str] = []

    if acwr is not None and acwr.has_sufficient_history:
        if acwr.status == "critical_risk":
            warnings.append("Critical: training load is more than twice your recent average (high injury risk).")
        elif acwr.status == "high_risk":
            warnings.append("High training load detected. Consider reducing volume or taking extra rest.")
        elif acwr.acwr < 0.5:
            warnings.append("Training load very low. You may be losing fitness.")

    fatigued = [m for m in muscles if m.status == "fatigued"]
    if fatigued:
        names = ", ".join(m.muscle.value for m in fatigued)
        warnings.append(f"{names} not fully recovered ({fatigued[0].score:.1f}/10).")

    if performance < 30:
        warnings.append("Low performance state. Consider lighter training or a rest day.")

    return warnings


def _generate_recommendations(
    acwr: Optional[ACWRResult],
    performance: float,
    muscles: Sequence[MuscleReadiness],
) -> list[str]:
    recommendations: list[str] = []

    if acwr is not None and acwr.has_sufficient_history:
        if acwr.status == "optimal":
            recommendations.append("Training load is in the optimal zone. Keep up this workload.")
        elif acwr.status in ("high_risk", "critical_risk"):
            recommendations.append("Plan a deload week within the next 1-2 weeks.")
        elif acwr.status == "detraining":
            recommendations.append("Gradually increase training volume.")

    recovering = [m for m in muscles if m.status == "recovering"]
    if recovering:
        names = ", ".join(m.muscle.value for m in recovering)
        recommendations.append(f"{names} still recovering. Consider lighter training for them.")

    if performance > 70:
        recommendations.append("Great day to push for PRs.")

    return recommendations


# ======================================================================
# Main entry point
# ======================================================================


def readiness_confidence(*available: bool) -> float:
    """0.25 per available model."""
    return min(1.0, CONFIDENCE_PER_MODEL * sum(1 for flag in available if flag))


def summarise(
    acwr: Optional[ACWRResult],
    fitness_fatigue: Optional[FitnessFatigueState],
    displayed_fitness_fatigue: FitnessFatigueState,
    muscles: Sequence[MuscleReadiness],
) -> tuple[float, str, list[str], list[str]]:
    """Overall score, status label, warnings and recommendations.

    *fitness_fatigue* is ``None`` when the model is unavailable, in which
    case *displayed_fitness_fatigue* holds the documented default used for
    the text guidance.
    """
    score = _compute_overall_score(acwr, fitness_fatigue, muscles)
    performance = displayed_fitness_fatigue.performance_score
    return (
        score,
        _label_overall(score),
        _generate_warnings(acwr, performance, muscles),
        _generate_recommendations(acwr, performance, muscles),
    )
