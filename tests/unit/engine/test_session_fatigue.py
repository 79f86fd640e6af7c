"""
Unit tests for the in-session fatigue assessor.

Covers the score terms, severity overrides, the alert threshold and the
empty-session result.
"""

import pytest

from app.engine.session_fatigue import (
    _classify_severity,
    assess_session_fatigue,
    build_alert,
    compute_indicators,
    is_unintentional_failure,
    score_indicators,
)
from app.exercises.catalog import muscle_groups_for
from app.schemas.muscle_group import MuscleGroup
from app.schemas.session_fatigue import FatigueIndicators
from app.schemas.workout import SetRecord


# ======================================================================
# Helpers
# ======================================================================


def _make_set(i=0, exercise_id="bench_press", weight=100.0, reps=5, rpe=7.0, prescribed=7.0, **flags) -> SetRecord:
    return SetRecord(
        exercise_id=exercise_id,
        set_index=i,
        actual_weight=weight,
        actual_reps=reps,
        actual_rpe=rpe,
        prescribed_rpe=prescribed,
        **flags,
    )


# ======================================================================
# Failure classification
# ======================================================================


class TestUnintentionalFailure:
    @pytest.mark.parametrize(
        "kwargs, expected",
        [
            (dict(reached_failure=True, actual_rpe=7.0), True),
            (dict(reached_failure=True, actual_rpe=6.0), True),
            (dict(reached_failure=True, actual_rpe=7.5), False),
            (dict(reached_failure=True, actual_rpe=10.0), False),
            (dict(reached_failure=True), True),
            (dict(reached_failure=True, actual_rir=3.0), True),
            (dict(reached_failure=True, actual_rir=0.0), False),
            (dict(reached_failure=False, actual_rpe=5.0), False),
        ],
    )
    def test_rules(self, kwargs, expected):
        s = SetRecord(exercise_id="bench_press", actual_weight=100.0, actual_reps=5, **kwargs)
        assert is_unintentional_failure(s) is expected


# ======================================================================
# Score
# ======================================================================


class TestScore:
    def test_volume_term(self):
        ind = compute_indicators([_make_set(weight=200.0, reps=10)])
        assert score_indicators(ind) == pytest.approx(2.0)

    def test_volume_capped(self):
        sets = [_make_set(i, weight=1000.0, reps=10) for i in range(6)]
        assert score_indicators(compute_indicators(sets)) == pytest.approx(40.0)

    def test_overshoot_term(self):
        sets = [_make_set(0, weight=0.0, rpe=9.0, prescribed=7.0), _make_set(1, weight=0.0, rpe=8.0, prescribed=7.0)]
        ind = compute_indicators(sets)
        assert ind.rpe_overshoot == pytest.approx(1.5)
        assert score_indicators(ind) == pytest.approx(15.0)

    def test_undershoot_not_negative(self):
        sets = [_make_set(weight=0.0, rpe=5.0, prescribed=8.0)]
        assert score_indicators(compute_indicators(sets)) == 0.0

    def test_sets_without_prescription_skip_overshoot(self):
        sets = [_make_set(weight=0.0, rpe=9.0, prescribed=None)]
        assert compute_indicators(sets).rpe_overshoot == 0.0

    def test_form_and_failure_terms(self):
        sets = [
            _make_set(0, weight=0.0, form_breakdown=True),
            _make_set(1, weight=0.0, reached_failure=True),
        ]
        assert score_indicators(compute_indicators(sets)) == pytest.approx(25.0)

    def test_clamped_to_100(self):
        sets = [_make_set(i, weight=0.0, reached_failure=True, form_breakdown=True, rpe=None) for i in range(8)]
        assert score_indicators(compute_indicators(sets)) == 100.0


# ======================================================================
# Severity
# ======================================================================


class TestClassifySeverity:
    @pytest.mark.parametrize(
        "score, indicators, expected",
        [
            (10.0, FatigueIndicators(), "mild"),
            (54.9, FatigueIndicators(), "mild"),
            (55.0, FatigueIndicators(), "moderate"),
            (20.0, FatigueIndicators(rpe_overshoot=2.0), "moderate"),
            (70.0, FatigueIndicators(), "high"),
            (10.0, FatigueIndicators(form_breakdown=2), "high"),
            (10.0, FatigueIndicators(unintentional_failure=1), "high"),
            (85.0, FatigueIndicators(), "critical"),
            (10.0, FatigueIndicators(form_breakdown=3), "critical"),
            (10.0, FatigueIndicators(unintentional_failure=2), "critical"),
        ],
    )
    def test_thresholds_and_overrides(self, score, indicators, expected):
        assert _classify_severity(score, indicators) == expected


# ======================================================================
# Alert
# ======================================================================


class TestBuildAlert:
    def test_none_below_threshold(self):
        assert build_alert(59.9, "critical", []) is None

    def test_present_at_threshold(self):
        alert = build_alert(60.0, "moderate", [MuscleGroup.CHEST])
        assert alert is not None
        assert alert.severity == "moderate"
        assert alert.suggested_reduction == pytest.approx(0.10)
        assert alert.affected_muscles == [MuscleGroup.CHEST]

    @pytest.mark.parametrize(
        "severity, reduction",
        [("critical", 0.25), ("high", 0.15), ("moderate", 0.10), ("mild", 0.0)],
    )
    def test_reduction_by_severity(self, severity, reduction):
        assert build_alert(90.0, severity, []).suggested_reduction == pytest.approx(reduction)


# ======================================================================
# assess_session_fatigue
# ======================================================================


class TestAssessSessionFatigue:
    def test_empty_session(self):
        result = assess_session_fatigue([])
        assert result.overall_fatigue == 0.0
        assert result.severity == "mild"
        assert result.should_reduce_weight is False
        assert result.alert is None
        assert result.confidence == 1.0

    def test_only_incomplete_sets_is_empty(self):
        result = assess_session_fatigue([_make_set(completed=False, reached_failure=True)])
        assert result.overall_fatigue == 0.0
        assert result.reasoning == "No sets completed yet"

    def test_failures_and_form_breakdown(self):
        """Two unplanned failures and a form breakdown → reduce weight."""
        sets = [
            _make_set(0, rpe=7.0, prescribed=6.0, reached_failure=True),
            _make_set(1, rpe=7.0, prescribed=6.0, reached_failure=True),
            _make_set(2, rpe=9.0, prescribed=7.0, form_breakdown=True),
            _make_set(3),
        ]
        result = assess_session_fatigue(sets)

        # overshoot 1.0 → 10, form 10, failures 30, volume 2000 → 2
        assert result.overall_fatigue == pytest.approx(52.0)
        assert result.overall_fatigue >= 50.0
        assert result.severity in ("high", "critical")
        assert result.should_reduce_weight is True
        assert result.reduction_percent == 25.0
        assert result.indicators.unintentional_failure == 2
        assert result.indicators.form_breakdown == 1
        assert "unintentional failures" in result.reasoning
        # Score below 60: no alert object
        assert result.alert is None

    def test_alert_with_affected_muscles(self):
        sets = [_make_set(i, rpe=None, prescribed=None, reached_failure=True) for i in range(4)]
        result = assess_session_fatigue(sets, muscle_groups_for)

        assert result.overall_fatigue == pytest.approx(62.0)
        assert result.severity == "critical"
        assert result.alert is not None
        assert result.alert.suggested_reduction == pytest.approx(0.25)
        assert result.affected_muscles == [MuscleGroup.CHEST, MuscleGroup.TRICEPS, MuscleGroup.FRONT_DELTS]
        assert result.alert.affected_muscles == result.affected_muscles

    def test_three_form_breakdowns_critical(self):
        sets = [_make_set(i, weight=20.0, form_breakdown=True) for i in range(3)]
        result = assess_session_fatigue(sets)
        assert result.severity == "critical"
        assert result.overall_fatigue < 60.0

    def test_clean_session_mild(self):
        result = assess_session_fatigue([_make_set(i) for i in range(3)])
        assert result.severity == "mild"
        assert result.should_reduce_weight is False
        assert result.reduction_percent == 0.0
        assert result.reasoning.startswith("Fatigue score")

    def test_no_muscles_without_lookup(self):
        assert assess_session_fatigue([_make_set()]).affected_muscles == []

    @pytest.mark.parametrize("n_sets, confidence", [(1, 0.2), (2, 0.4), (5, 1.0), (8, 1.0)])
    def test_confidence_grows_with_sets(self, n_sets, confidence):
        result = assess_session_fatigue([_make_set(i) for i in range(n_sets)])
        assert result.confidence == pytest.approx(confidence)

    def test_high_volume_reasoning(self):
        sets = [_make_set(i, weight=1000.0, reps=10, form_breakdown=(i == 0)) for i in range(6)]
        assert "high volume accumulation (60K)" in assess_session_fatigue(sets).reasoning
