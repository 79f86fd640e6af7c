"""
Unit tests for the per-muscle readiness scorer.

Covers the penalty terms, score clamping, recovery profiles and the
derivation of muscle training state from session history.
"""

import datetime

import pytest

from app.engine.readiness import (
    _label_status,
    accumulation_penalty,
    build_recovery_profile,
    chronic_fatigue_penalty,
    consecutive_training_days,
    derive_training_states,
    fatigue_snapshots_for_session,
    frequency_penalty,
    muscle_fatigue_scores,
    rank_least_ready,
    score_readiness,
    to_muscle_readiness,
)
from app.engine.recovery_curve import RecoveryConfig
from app.exercises.catalog import muscle_groups_for
from app.schemas.muscle_group import MuscleGroup
from app.schemas.recovery import MuscleReadiness, MuscleTrainingState
from app.schemas.workout import SessionRecord, SetRecord

AS_OF = datetime.datetime(2026, 3, 2, 12, 0)


# ======================================================================
# Helpers
# ======================================================================


def _make_set(exercise_id="bench_press", weight=135.0, reps=8, rpe=7.0, **overrides) -> SetRecord:
    data = dict(
        exercise_id=exercise_id,
        actual_weight=weight,
        actual_reps=reps,
        actual_rpe=rpe,
        prescribed_rpe=rpe,
    )
    data.update(overrides)
    return SetRecord(**data)


def _make_session(hours_ago: float, sets, session_id=None, completed=True) -> SessionRecord:
    ended = AS_OF - datetime.timedelta(hours=hours_ago)
    return SessionRecord(
        session_id=session_id or f"s-{hours_ago}",
        started_at=ended - datetime.timedelta(hours=1),
        ended_at=ended if completed else None,
        sets=list(sets),
    )


def _make_state(muscle=MuscleGroup.QUADS, hours_ago=72.0, fatigue=50.0, recent=()) -> MuscleTrainingState:
    return MuscleTrainingState(
        muscle_group=muscle,
        last_trained_at=AS_OF - datetime.timedelta(hours=hours_ago),
        last_fatigue_score=fatigue,
        recent_fatigue_scores=list(recent),
    )


# ======================================================================
# Penalties
# ======================================================================


class TestChronicFatiguePenalty:
    def test_no_history(self):
        assert chronic_fatigue_penalty([]) == 0.0

    def test_low_fatigue_no_penalty(self):
        assert chronic_fatigue_penalty([2.0, 5.0, 3.0]) == 0.0

    def test_sustained_fatigue(self):
        # avg 15 → (15 − 5) / 10 = 1; peak 15 < 20 → 0
        assert chronic_fatigue_penalty([15.0, 15.0]) == pytest.approx(1.0)

    def test_peak_fatigue(self):
        # avg 35 → 3; peak 50 → 0.5 × 2 = 1
        assert chronic_fatigue_penalty([20.0, 50.0]) == pytest.approx(4.0)

    def test_capped_at_five(self):
        assert chronic_fatigue_penalty([100.0] * 5) == 5.0


class TestFrequencyPenalty:
    @pytest.mark.parametrize(
        "hours, expected",
        [
            (0.0, 3.0),
            (11.9, 3.0),
            (12.0, 2.0),
            (23.9, 2.0),
            (24.0, 1.5),
            (35.9, 1.5),
            (36.0, 1.0),
            (47.9, 1.0),
            (48.0, 0.0),
            (200.0, 0.0),
        ],
    )
    def test_bands(self, hours, expected):
        assert frequency_penalty(hours) == expected

    def test_unknown_hours_with_two_snapshots(self):
        assert frequency_penalty(None, snapshot_count=2) == 1.0

    def test_unknown_hours_with_one_snapshot(self):
        assert frequency_penalty(None, snapshot_count=1) == 0.0


# ======================================================================
# score_readiness
# ======================================================================


class TestScoreReadiness:
    def test_fully_recovered(self):
        assert score_readiness(100.0) == 10.0

    def test_recent_training_penalised(self):
        assert score_readiness(100.0, [], 10.0) == 7.0

    def test_floor_at_one(self):
        assert score_readiness(0.0, [100.0] * 5, 1.0) == 1.0

    def test_one_decimal(self):
        assert score_readiness(87.64) == 8.8

    @pytest.mark.parametrize("pct", [-10.0, 0.0, 12.3, 50.0, 95.0, 100.0, 140.0])
    @pytest.mark.parametrize("recent", [[], [0.0], [30.0, 80.0], [100.0] * 5])
    @pytest.mark.parametrize("hours", [None, 0.0, 20.0, 100.0])
    def test_always_in_range(self, pct, recent, hours):
        assert 1.0 <= score_readiness(pct, recent, hours) <= 10.0


class TestLabelStatus:
    @pytest.mark.parametrize(
        "score, expected",
        [
            (1.0, "fatigued"),
            (5.9, "fatigued"),
            (6.0, "recovering"),
            (7.9, "recovering"),
            (8.0, "ready"),
            (10.0, "ready"),
        ],
    )
    def test_thresholds(self, score, expected):
        assert _label_status(score) == expected


# ======================================================================
# Profiles
# ======================================================================


class TestRecoveryProfile:
    def test_profile_at_full_window(self):
        profile = build_recovery_profile(_make_state(hours_ago=72.0, fatigue=50.0), AS_OF)
        assert profile.hours_since_training == pytest.approx(72.0)
        assert profile.recovery_percentage == pytest.approx(95.0)
        assert profile.readiness_score == 9.5
        assert profile.estimated_full_recovery_at == AS_OF

    def test_chronic_history_lowers_score(self):
        fresh = build_recovery_profile(_make_state(recent=[]), AS_OF)
        tired = build_recovery_profile(_make_state(recent=[60.0, 70.0]), AS_OF)
        assert tired.readiness_score < fresh.readiness_score

    def test_future_training_time_treated_as_now(self):
        profile = build_recovery_profile(_make_state(hours_ago=-5.0), AS_OF)
        assert profile.hours_since_training == 0.0
        assert profile.recovery_percentage == 0.0
        assert profile.readiness_score == 1.0

    def test_muscle_readiness_hours_until_ready(self):
        profile = build_recovery_profile(_make_state(hours_ago=24.0, fatigue=50.0), AS_OF)
        entry = to_muscle_readiness(profile, AS_OF)
        assert entry.hours_until_ready == pytest.approx(48.0)
        assert entry.muscle == MuscleGroup.QUADS

    def test_muscle_readiness_no_countdown_once_recovered(self):
        profile = build_recovery_profile(_make_state(hours_ago=100.0), AS_OF)
        assert to_muscle_readiness(profile, AS_OF).hours_until_ready is None

    def test_rank_least_ready_first(self):
        entries = [
            MuscleReadiness(muscle=MuscleGroup.CHEST, score=8.5, status="ready", recovery_percentage=90.0),
            MuscleReadiness(muscle=MuscleGroup.QUADS, score=4.0, status="fatigued", recovery_percentage=40.0),
            MuscleReadiness(muscle=MuscleGroup.BACK, score=6.5, status="recovering", recovery_percentage=70.0),
        ]
        ranked = rank_least_ready(entries)
        assert [m.muscle for m in ranked] == [MuscleGroup.QUADS, MuscleGroup.BACK, MuscleGroup.CHEST]


# ======================================================================
# Muscle state derivation
# ======================================================================


class TestDeriveTrainingStates:
    def test_bench_session_trains_three_muscles(self):
        sessions = [_make_session(48.0, [_make_set()])]
        states = derive_training_states(sessions, muscle_groups_for, AS_OF)
        muscles = {st.muscle_group for st in states}
        assert muscles == {MuscleGroup.CHEST, MuscleGroup.TRICEPS, MuscleGroup.FRONT_DELTS}
        chest = next(st for st in states if st.muscle_group == MuscleGroup.CHEST)
        # 135 × 8 = 1080 volume → 1.08, no overshoot
        assert chest.last_fatigue_score == pytest.approx(1.1)
        assert chest.last_trained_at == AS_OF - datetime.timedelta(hours=48)
        assert chest.recent_fatigue_scores == [pytest.approx(1.1)]

    def test_latest_session_wins(self):
        sessions = [
            _make_session(100.0, [_make_set(weight=100.0)], session_id="old"),
            _make_session(30.0, [_make_set(weight=200.0)], session_id="new"),
        ]
        states = derive_training_states(sessions, muscle_groups_for, AS_OF)
        chest = next(st for st in states if st.muscle_group == MuscleGroup.CHEST)
        assert chest.last_trained_at == AS_OF - datetime.timedelta(hours=30)
        assert chest.recent_fatigue_scores == [pytest.approx(1.6), pytest.approx(0.8)]

    def test_outside_lookback_ignored(self):
        sessions = [_make_session(15 * 24.0, [_make_set()])]
        assert derive_training_states(sessions, muscle_groups_for, AS_OF) == []

    def test_incomplete_sessions_ignored(self):
        sessions = [_make_session(10.0, [_make_set()], completed=False)]
        assert derive_training_states(sessions, muscle_groups_for, AS_OF) == []

    def test_stored_scores_preferred(self):
        sessions = [_make_session(48.0, [_make_set()])]
        states = derive_training_states(
            sessions, muscle_groups_for, AS_OF, recent_scores_for=lambda m: [40.0, 30.0],
        )
        assert all(st.recent_fatigue_scores == [40.0, 30.0] for st in states)

    def test_stored_scores_truncated(self):
        sessions = [_make_session(48.0, [_make_set()])]
        states = derive_training_states(
            sessions, muscle_groups_for, AS_OF, recent_scores_for=lambda m: [1.0] * 9,
        )
        assert all(len(st.recent_fatigue_scores) == 5 for st in states)


class TestFatigueSnapshots:
    def test_one_snapshot_per_muscle(self):
        session = _make_session(
            2.0,
            [
                _make_set(),
                _make_set(reached_failure=True, actual_rpe=7.0),
                _make_set(exercise_id="bicep_curl", weight=30.0, reps=10, form_breakdown=True),
            ],
            session_id="w1",
        )
        snapshots = fatigue_snapshots_for_session("a1", session, muscle_groups_for)
        by_muscle = {s.muscle_group: s for s in snapshots}

        assert set(by_muscle) == {
            MuscleGroup.CHEST, MuscleGroup.TRICEPS, MuscleGroup.FRONT_DELTS,
            MuscleGroup.BICEPS, MuscleGroup.FOREARMS,
        }
        chest = by_muscle[MuscleGroup.CHEST]
        assert chest.failure_count == 1
        assert chest.form_breakdown_count == 0
        assert chest.volume_load == pytest.approx(2160.0)
        assert chest.fatigue_score == pytest.approx(17.2)
        assert chest.session_id == "w1"
        assert by_muscle[MuscleGroup.BICEPS].form_breakdown_count == 1

    def test_scores_match_muscle_fatigue_scores(self):
        session = _make_session(2.0, [_make_set(), _make_set(exercise_id="back_squat", weight=225.0, reps=5)])
        snapshots = fatigue_snapshots_for_session("a1", session, muscle_groups_for)
        scores = muscle_fatigue_scores(session, muscle_groups_for)
        assert {s.muscle_group: s.fatigue_score for s in snapshots} == scores


# ======================================================================
# Accumulation (consecutive days, weekly frequency)
# ======================================================================

ACCUMULATING = RecoveryConfig(accumulation_penalties=True)


class TestConsecutiveTrainingDays:
    def test_run_ending_today(self):
        trained = [AS_OF - datetime.timedelta(hours=h) for h in (2.0, 26.0, 50.0)]
        assert consecutive_training_days(trained, AS_OF) == 3

    def test_run_may_end_before_today(self):
        trained = [AS_OF - datetime.timedelta(hours=h) for h in (30.0, 100.0)]
        assert consecutive_training_days(trained, AS_OF) == 1

    def test_same_day_counts_once(self):
        trained = [AS_OF - datetime.timedelta(hours=h) for h in (1.0, 3.0)]
        assert consecutive_training_days(trained, AS_OF) == 1

    def test_older_than_a_week_ignored(self):
        assert consecutive_training_days([AS_OF - datetime.timedelta(days=8)], AS_OF) == 0


class TestAccumulationPenalty:
    def test_disabled_by_default(self):
        assert accumulation_penalty(5, 9) == 0.0

    def test_consecutive_and_weekly(self):
        # (min(3 - 1, 4) + (6 - 4) × 0.5) × 0.2
        assert accumulation_penalty(3, 6, ACCUMULATING) == pytest.approx(0.6)

    def test_single_day_free(self):
        assert accumulation_penalty(1, 4, ACCUMULATING) == 0.0

    def test_consecutive_capped(self):
        assert accumulation_penalty(7, 0, ACCUMULATING) == pytest.approx(0.8)

    def test_profile_applies_penalty_only_when_enabled(self):
        state = _make_state().model_copy(update={"consecutive_training_days": 3, "sessions_last_7_days": 6})
        assert build_recovery_profile(state, AS_OF).readiness_score == 9.5
        assert build_recovery_profile(state, AS_OF, ACCUMULATING).readiness_score == 8.9

    def test_derived_states_carry_counts(self):
        sessions = [
            _make_session(h, [_make_set()], session_id=f"b{h}")
            for h in (2.0, 26.0, 50.0, 200.0)
        ]
        states = derive_training_states(sessions, muscle_groups_for, AS_OF)
        chest = next(st for st in states if st.muscle_group == MuscleGroup.CHEST)
        assert chest.consecutive_training_days == 3
        assert chest.sessions_last_7_days == 3
