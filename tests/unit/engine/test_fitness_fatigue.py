"""Tests for the Banister fitness-fatigue model and its ordering contract."""

import datetime
import math

import pytest

from app.engine.errors import OutOfOrderSessionError
from app.engine.fitness_fatigue import (
    DEFAULT_FITNESS_FATIGUE_CONFIG,
    LoadSeries,
    advance,
    build_fitness_fatigue,
    default_state,
    empty_state,
    fold,
    is_available,
    performance_score,
    replay,
)
from app.schemas.acwr import LoadPoint
from app.schemas.workout import SessionRecord, SetRecord

DAY0 = datetime.datetime(2026, 2, 1, 9, 0)


# ======================================================================
# Helpers
# ======================================================================


def _make_point(day: float, load: float) -> LoadPoint:
    return LoadPoint(on=DAY0 + datetime.timedelta(days=day), load=load)


def _make_session(day: float, weight=100.0, reps=10, rpe=8.0) -> SessionRecord:
    ended = DAY0 + datetime.timedelta(days=day)
    return SessionRecord(
        session_id=f"s-{day}",
        started_at=ended - datetime.timedelta(hours=1),
        ended_at=ended,
        sets=[SetRecord(exercise_id="back_squat", actual_weight=weight, actual_reps=reps, actual_rpe=rpe)],
    )


# ======================================================================
# Scores and defaults
# ======================================================================


class TestPerformanceScore:
    @pytest.mark.parametrize(
        "net, expected",
        [
            (-100.0, 0.0),
            (-500.0, 0.0),
            (0.0, 100.0 / 3.0),
            (50.0, 50.0),
            (200.0, 100.0),
            (1000.0, 100.0),
        ],
    )
    def test_mapping(self, net, expected):
        assert performance_score(net) == pytest.approx(expected)


class TestDefaults:
    def test_empty_state(self):
        state = empty_state()
        assert state.fitness == 0.0
        assert state.fatigue == 0.0
        assert state.sessions_processed == 0
        assert state.last_session_at is None

    def test_default_state(self):
        state = default_state()
        assert state.fitness == 50.0
        assert state.fatigue == 25.0
        assert state.net_performance == 25.0
        assert state.performance_score == pytest.approx(41.7)


# ======================================================================
# advance / fold
# ======================================================================


class TestAdvance:
    def test_impulse_from_empty(self):
        state = advance(empty_state(), 10.0, 0.0)
        assert state.fitness == pytest.approx(10.0)
        assert state.fatigue == pytest.approx(20.0)
        assert state.net_performance == pytest.approx(-10.0)
        assert state.performance_score == pytest.approx(30.0)
        assert state.sessions_processed == 1

    def test_decay_over_a_week(self):
        start = advance(empty_state(), 10.0, 0.0)
        state = advance(start, 0.0, 7.0)
        assert state.fitness == pytest.approx(10.0 * math.exp(-1.0))
        assert state.fatigue == pytest.approx(20.0 * math.exp(-3.5))

    def test_fatigue_fades_faster(self):
        state = advance(advance(empty_state(), 10.0, 0.0), 0.0, 5.0)
        assert state.net_performance > 0

    def test_negative_days_rejected(self):
        with pytest.raises(ValueError):
            advance(empty_state(), 10.0, -1.0)


class TestFold:
    def test_gap_measured_from_last_session(self):
        state = fold(empty_state(), _make_point(0, 10.0))
        state = fold(state, _make_point(7, 0.0))
        assert state.fitness == pytest.approx(10.0 * math.exp(-1.0))
        assert state.fatigue == pytest.approx(20.0 * math.exp(-3.5))
        assert state.sessions_processed == 2
        assert state.last_session_at == DAY0 + datetime.timedelta(days=7)

    def test_same_day_sessions_allowed(self):
        state = fold(empty_state(), _make_point(0, 10.0))
        state = fold(state, _make_point(0, 5.0))
        assert state.fitness == pytest.approx(15.0)

    def test_earlier_session_raises(self):
        state = fold(empty_state(), _make_point(5, 10.0))
        with pytest.raises(OutOfOrderSessionError):
            fold(state, _make_point(2, 10.0))

    def test_out_of_order_error_is_value_error(self):
        state = fold(empty_state(), _make_point(5, 10.0))
        with pytest.raises(ValueError):
            fold(state, _make_point(2, 10.0))


# ======================================================================
# LoadSeries / replay
# ======================================================================


class TestLoadSeries:
    def test_rejects_unsorted_points(self):
        with pytest.raises(OutOfOrderSessionError):
            LoadSeries([_make_point(3, 1.0), _make_point(1, 1.0)])

    def test_chronological_sorts(self):
        series = LoadSeries.chronological([_make_point(3, 1.0), _make_point(1, 2.0), _make_point(2, 3.0)])
        assert [p.load for p in series] == [2.0, 3.0, 1.0]
        assert len(series) == 3

    def test_from_sessions_skips_incomplete(self):
        open_session = SessionRecord(session_id="open", started_at=DAY0)
        series = LoadSeries.from_sessions([_make_session(1), open_session])
        assert len(series) == 1
        # 100 × 10 × 0.8 / 1000
        assert list(series)[0].load == pytest.approx(0.8)


class TestReplay:
    def test_deterministic(self):
        series = LoadSeries.chronological([_make_point(d, 10.0 + d) for d in range(0, 20, 3)])
        assert replay(series) == replay(series)

    def test_matches_sequential_fold(self):
        points = [_make_point(0, 10.0), _make_point(2, 50.0), _make_point(9, 20.0)]
        state = empty_state()
        for p in points:
            state = fold(state, p)
        assert replay(LoadSeries(points)) == state

    def test_order_matters(self):
        """Applying the same loads in reverse produces a different state."""
        points = [_make_point(0, 10.0), _make_point(2, 50.0), _make_point(9, 20.0)]
        correct = replay(LoadSeries(points))

        wrong = empty_state()
        for load, gap in ((20.0, 0.0), (50.0, 7.0), (10.0, 2.0)):
            wrong = advance(wrong, load, gap)

        assert wrong.net_performance != pytest.approx(correct.net_performance)

    def test_input_order_irrelevant_once_sorted(self):
        points = [_make_point(9, 20.0), _make_point(0, 10.0), _make_point(2, 50.0)]
        assert replay(LoadSeries.chronological(points)) == replay(LoadSeries.chronological(reversed(points)))

    def test_always_starts_empty(self):
        series = LoadSeries([_make_point(0, 10.0)])
        assert replay(series).sessions_processed == 1
        assert replay(series).sessions_processed == 1


class TestBuildAndAvailability:
    def test_build_from_sessions(self):
        state = build_fitness_fatigue([_make_session(4), _make_session(0), _make_session(2)])
        assert state.sessions_processed == 3
        assert state.last_session_at == DAY0 + datetime.timedelta(days=4)

    def test_unavailable_below_three_sessions(self):
        state = build_fitness_fatigue([_make_session(0), _make_session(2)])
        assert is_available(state) is False

    def test_available_from_three_sessions(self):
        state = build_fitness_fatigue([_make_session(d) for d in (0, 2, 4)])
        assert is_available(state) is True

    def test_none_unavailable(self):
        assert is_available(None) is False

    def test_threshold_is_configurable(self):
        cfg = DEFAULT_FITNESS_FATIGUE_CONFIG.model_copy(update={"min_sessions": 1})
        state = build_fitness_fatigue([_make_session(0)], cfg)
        assert is_available(state, cfg) is True
