"""
Unit tests for the set recommendation pipeline.

Covers baseline resolution, each adjustment and its threshold, the
per-adjustment cap, compounding order and the confidence tag.
"""

import pytest

from app.engine.recommendation import (
    confidence_for,
    recommend_set,
    resolve_baseline,
)
from app.schemas.recommendation import Adjustment, Baseline
from app.schemas.session_fatigue import FatigueAlert
from app.schemas.workout import SetRecord


# ======================================================================
# Helpers
# ======================================================================


def _make_baseline(weight=100.0, source="historical", reps=5) -> Baseline:
    return Baseline(source=source, weight=weight, reps=reps)


def _make_adjustments(n: int) -> list[Adjustment]:
    return [Adjustment(factor="acwr_overreach", adjustment=-0.01, reason="test") for _ in range(n)]


def _recommend(baseline=None, **kwargs):
    return recommend_set("bench_press", 2, 5, baseline or _make_baseline(), **kwargs)


# ======================================================================
# Baseline
# ======================================================================


class TestResolveBaseline:
    def test_last_session_set_wins(self):
        session_sets = [
            SetRecord(exercise_id="bench_press", set_index=0, actual_weight=100.0, actual_reps=5),
            SetRecord(exercise_id="bench_press", set_index=1, actual_weight=105.0, actual_reps=4),
            SetRecord(exercise_id="bench_press", set_index=2, actual_weight=110.0, actual_reps=2, completed=False),
            SetRecord(exercise_id="back_squat", set_index=0, actual_weight=200.0, actual_reps=5),
        ]
        baseline = resolve_baseline("bench_press", 5, session_sets=session_sets)
        assert baseline.source == "historical"
        assert baseline.weight == 105.0
        assert baseline.reps == 4

    def test_history_e1rm_converted_to_target(self):
        history = [SetRecord(exercise_id="bench_press", actual_weight=135.0, actual_reps=8, actual_rpe=7.0)]
        baseline = resolve_baseline("bench_press", 8, target_rpe=7.0, history_sets=history)
        assert baseline.source == "historical"
        assert baseline.weight == pytest.approx(135.0)
        assert baseline.reps == 8

    def test_history_best_set_used(self):
        history = [
            SetRecord(exercise_id="bench_press", actual_weight=100.0, actual_reps=5, actual_rpe=8.0),
            SetRecord(exercise_id="bench_press", actual_weight=120.0, actual_reps=5, actual_rpe=8.0),
        ]
        baseline = resolve_baseline("bench_press", 5, target_rpe=8.0, history_sets=history)
        assert baseline.weight == pytest.approx(120.0)

    def test_other_exercises_ignored(self):
        history = [SetRecord(exercise_id="back_squat", actual_weight=200.0, actual_reps=5)]
        baseline = resolve_baseline("bench_press", 5, history_sets=history, prescribed_weight=95.0)
        assert baseline.source == "prescribed"
        assert baseline.weight == 95.0

    def test_default_when_nothing_known(self):
        baseline = resolve_baseline("bench_press", 5)
        assert baseline.source == "default"
        assert baseline.weight == 135.0


# ======================================================================
# Adjustments
# ======================================================================


class TestAdjustments:
    def test_no_adjustments(self):
        rec = _recommend(muscle_readiness=8.0, acwr=1.0, session_fatigue=0.0, exercise_fatigue_rate=0.15)
        assert rec.suggested_weight == 100.0
        assert rec.adjustments == []
        assert rec.confidence == "high"
        assert "No adjustments needed" in rec.reasoning

    def test_low_readiness(self):
        rec = _recommend(muscle_readiness=5.0)
        assert rec.suggested_weight == pytest.approx(90.0)
        assert rec.adjustments[0].factor == "muscle_readiness"
        assert rec.adjustments[0].adjustment == pytest.approx(-0.10)

    def test_acwr_spike(self):
        rec = _recommend(acwr=1.8)
        assert rec.suggested_weight == pytest.approx(95.0)
        assert rec.adjustments[0].factor == "acwr_overreach"

    def test_session_fatigue(self):
        rec = _recommend(session_fatigue=70.0)
        assert rec.suggested_weight == pytest.approx(94.0)
        assert rec.adjustments[0].factor == "session_fatigue"

    def test_fast_fatiguing_exercise(self):
        rec = _recommend(exercise_fatigue_rate=0.25)
        assert rec.suggested_weight == pytest.approx(95.0)
        assert rec.adjustments[0].factor == "exercise_fatigue"

    @pytest.mark.parametrize(
        "kwargs",
        [
            dict(muscle_readiness=6.0),
            dict(acwr=1.5),
            dict(session_fatigue=60.0),
            dict(exercise_fatigue_rate=0.18),
        ],
    )
    def test_thresholds_are_strict(self, kwargs):
        assert _recommend(**kwargs).adjustments == []

    def test_single_cut_capped_at_half(self):
        rec = _recommend(acwr=10.0)
        assert rec.adjustments[0].adjustment == -0.5
        assert rec.suggested_weight == pytest.approx(50.0)

    def test_cuts_compound_in_order(self):
        rec = _recommend(muscle_readiness=5.0, acwr=1.8)
        assert [a.factor for a in rec.adjustments] == ["muscle_readiness", "acwr_overreach"]
        assert rec.suggested_weight == pytest.approx(85.5)

    def test_all_four_cuts(self):
        rec = _recommend(muscle_readiness=5.0, acwr=1.8, session_fatigue=70.0, exercise_fatigue_rate=0.25)
        assert [a.factor for a in rec.adjustments] == [
            "muscle_readiness", "acwr_overreach", "session_fatigue", "exercise_fatigue",
        ]
        # 100 × 0.90 × 0.95 × 0.94 × 0.95
        assert rec.suggested_weight == pytest.approx(76.4, abs=0.05)
        assert rec.confidence == "medium"

    def test_weight_rounded_to_tenth(self):
        rec = _recommend(_make_baseline(weight=101.3), muscle_readiness=5.0)
        assert rec.suggested_weight == pytest.approx(91.2)

    def test_unknown_readiness_uses_default(self):
        rec = _recommend(muscle_readiness=None)
        assert rec.adjustments == []
        assert rec.muscle_readiness == 7.0

    def test_alert_passed_through(self):
        alert = FatigueAlert(severity="high", message="m", suggested_reduction=0.15)
        assert _recommend(fatigue_alert=alert).fatigue_alert == alert

    def test_every_cut_has_a_reason(self):
        rec = _recommend(muscle_readiness=3.0, acwr=2.5, session_fatigue=90.0, exercise_fatigue_rate=0.4)
        assert all(a.reason for a in rec.adjustments)
        assert all(-0.5 <= a.adjustment < 0 for a in rec.adjustments)


# ======================================================================
# Confidence
# ======================================================================


class TestConfidence:
    @pytest.mark.parametrize(
        "source, n_adjustments, degraded, expected",
        [
            ("default", 0, False, "low"),
            ("default", 0, True, "low"),
            ("prescribed", 0, False, "medium"),
            ("prescribed", 0, True, "low"),
            ("historical", 0, False, "high"),
            ("historical", 2, False, "high"),
            ("historical", 3, False, "medium"),
            ("historical", 0, True, "medium"),
        ],
    )
    def test_tags(self, source, n_adjustments, degraded, expected):
        baseline = _make_baseline(source=source)
        assert confidence_for(baseline, _make_adjustments(n_adjustments), degraded) == expected

    def test_degraded_sources_reported(self):
        rec = _recommend(degraded_sources=["acwr"])
        assert rec.confidence == "medium"
        assert rec.degraded_sources == ["acwr"]
