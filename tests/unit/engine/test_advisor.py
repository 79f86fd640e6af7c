"""Tests for the pre-workout advisor that combines the longitudinal models."""

import datetime

import pytest

from app.engine.advisor import (
    _compute_overall_score,
    _generate_recommendations,
    _generate_warnings,
    _label_overall,
    readiness_confidence,
    summarise,
)
from app.engine.fitness_fatigue import default_state
from app.schemas.acwr import ACWRResult
from app.schemas.fitness_fatigue import FitnessFatigueState
from app.schemas.muscle_group import MuscleGroup
from app.schemas.recovery import MuscleReadiness

AS_OF = datetime.datetime(2026, 3, 1, 9, 0)


# ======================================================================
# Helpers
# ======================================================================


def _make_acwr(value: float, status: str, sufficient: bool = True) -> ACWRResult:
    return ACWRResult(
        acwr=value,
        status=status,
        acute_load=0.0,
        chronic_load=0.0,
        has_sufficient_history=sufficient,
        recommendation="",
        as_of=AS_OF,
    )


def _make_ff(performance: float) -> FitnessFatigueState:
    return FitnessFatigueState(performance_score=performance)


def _make_muscle(muscle: MuscleGroup, score: float, status: str) -> MuscleReadiness:
    return MuscleReadiness(muscle=muscle, score=score, status=status, recovery_percentage=score * 10)


# ======================================================================
# Overall score
# ======================================================================


class TestOverallScore:
    def test_default_without_models(self):
        assert _compute_overall_score(None, None, []) == 7.0

    def test_from_performance(self):
        assert _compute_overall_score(None, _make_ff(80.0), []) == 8.0

    def test_acwr_spike_penalty(self):
        assert _compute_overall_score(_make_acwr(1.8, "high_risk"), _make_ff(80.0), []) == pytest.approx(7.0)

    def test_acwr_detraining_penalty(self):
        assert _compute_overall_score(_make_acwr(0.5, "detraining"), _make_ff(80.0), []) == pytest.approx(7.4)

    def test_unknown_acwr_ignored(self):
        acwr = _make_acwr(1.0, "unknown", sufficient=False)
        assert _compute_overall_score(acwr, _make_ff(80.0), []) == 8.0

    def test_muscles_averaged_in(self):
        muscles = [_make_muscle(MuscleGroup.CHEST, 4.0, "fatigued"), _make_muscle(MuscleGroup.BACK, 6.0, "recovering")]
        assert _compute_overall_score(None, _make_ff(80.0), muscles) == pytest.approx(6.5)

    def test_clamped(self):
        assert _compute_overall_score(_make_acwr(5.0, "critical_risk"), _make_ff(0.0), []) == 1.0

    @pytest.mark.parametrize(
        "score, expected",
        [(9.0, "excellent"), (8.0, "excellent"), (7.9, "good"), (6.0, "good"), (5.0, "moderate"), (3.9, "poor")],
    )
    def test_labels(self, score, expected):
        assert _label_overall(score) == expected


# ======================================================================
# Guidance text
# ======================================================================


class TestGuidance:
    def test_critical_acwr_warning(self):
        warnings = _generate_warnings(_make_acwr(2.5, "critical_risk"), 50.0, [])
        assert any("Critical" in w for w in warnings)

    def test_fatigued_muscles_named(self):
        muscles = [_make_muscle(MuscleGroup.QUADS, 3.0, "fatigued")]
        warnings = _generate_warnings(None, 50.0, muscles)
        assert any("quads" in w for w in warnings)

    def test_low_performance_warning(self):
        assert any("rest day" in w for w in _generate_warnings(None, 20.0, []))

    def test_no_warnings_when_fresh(self):
        assert _generate_warnings(_make_acwr(1.0, "optimal"), 60.0, []) == []

    def test_optimal_recommendation(self):
        recs = _generate_recommendations(_make_acwr(1.0, "optimal"), 60.0, [])
        assert any("optimal zone" in r for r in recs)

    def test_pr_day(self):
        assert any("PRs" in r for r in _generate_recommendations(None, 80.0, []))


class TestConfidenceAndSummary:
    @pytest.mark.parametrize(
        "flags, expected",
        [((), 0.0), ((False, False, False, False), 0.0), ((True, False, True, False), 0.5), ((True,) * 4, 1.0)],
    )
    def test_confidence(self, flags, expected):
        assert readiness_confidence(*flags) == pytest.approx(expected)

    def test_summarise_without_models(self):
        score, status, warnings, recommendations = summarise(None, None, default_state(), [])
        assert score == 7.0
        assert status == "good"
        assert warnings == []
        assert recommendations == []
