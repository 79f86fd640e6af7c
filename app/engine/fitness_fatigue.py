"""
Fitness-fatigue (Banister) model — longitudinal two-factor state.

Each session decays both components over the gap since the previous one
and then adds an impulse proportional to its load:

    fitness' = fitness × exp(−Δd / τ1) + k1 × load       τ1 = 7d,  k1 = 1
    fatigue' = fatigue × exp(−Δd / τ2) + k2 × load       τ2 = 2d,  k2 = 2
    net      = fitness − fatigue

Fatigue rises twice as fast and fades 3.5× sooner than fitness, so a
hard block dips net performance before it lifts it.

Ordering contract
-----------------
Decay is multiplicative across the gap since the *previous* update, so
there is no closed-form batch solution: sessions must be folded one at
a time in non-decreasing date order, and a rebuild must replay the whole
history from the empty state.  The contract is carried by the types:

- :class:`LoadSeries` only holds chronologically ordered points
  (:meth:`LoadSeries.chronological` sorts arbitrary input);
- :func:`replay` accepts a :class:`LoadSeries` and always starts empty;
- :func:`fold` raises :class:`OutOfOrderSessionError` for a session that
  predates the state.

Out-of-order folding is a correctness bug, not a style issue.
"""

from __future__ import annotations

import datetime
import math
from typing import Iterable, Iterator, Optional, Sequence

from pydantic import BaseModel, Field

from app.engine.errors import OutOfOrderSessionError
from app.engine.training_load import effort_load
from app.schemas.acwr import LoadPoint
from app.schemas.fitness_fatigue import FitnessFatigueState
from app.schemas.workout import SessionRecord

# ======================================================================
# Configuration
# ======================================================================


class FitnessFatigueConfig(BaseModel):
    """Banister constants and availability threshold."""

    tau_fitness_days: float = Field(7.0, gt=0.0)
    tau_fatigue_days: float = Field(2.0, gt=0.0)
    k_fitness: float = Field(1.0, ge=0.0)
    k_fatigue: float = Field(2.0, ge=0.0)
    min_sessions: int = Field(3, ge=1, description="Completed sessions before the model is reported")

    # Reported when the model is unavailable.
    default_fitness: float = 50.0
    default_fatigue: float = 25.0


DEFAULT_FITNESS_FATIGUE_CONFIG = FitnessFatigueConfig()

_SECONDS_PER_DAY = 86400.0


def performance_score(net_performance: float) -> float:
    """Map raw net performance onto a 0–100 display scale."""
    return max(0.0, min(100.0, (net_performance + 100.0) / 300.0 * 100.0))


def empty_state() -> FitnessFatigueState:
    return FitnessFatigueState(performance_score=performance_score(0.0))


def default_state(config: FitnessFatigueConfig = DEFAULT_FITNESS_FATIGUE_CONFIG) -> FitnessFatigueState:
    """Documented fallback reported when the model is unavailable."""
    net = config.default_fitness - config.default_fatigue
    return FitnessFatigueState(
        fitness=config.default_fitness,
        fatigue=config.default_fatigue,
        net_performance=net,
        performance_score=round(performance_score(net), 1),
    )


# ======================================================================
# Ordered input
# ======================================================================


class LoadSeries:
    """Immutable, chronologically ordered sequence of load points."""

    def __init__(self, points: Sequence[LoadPoint]) -> None:
        points = tuple(points)
        for previous, current in zip(points, points[1:]):
            if current.on < previous.on:
                raise OutOfOrderSessionError(
                    f"load point at {current.on.isoformat()} precedes {previous.on.isoformat()}"
                )
        self._points = points

    @classmethod
    def chronological(cls, points: Iterable[LoadPoint]) -> "LoadSeries":
        """Build a series from points in any order."""
        return cls(sorted(points, key=lambda p: p.on))

    @classmethod
    def from_sessions(cls, sessions: Iterable[SessionRecord]) -> "LoadSeries":
        """Effort-weighted load of every completed session, sorted."""
        return cls.chronological(
            LoadPoint(on=s.performed_at, load=effort_load(s)) for s in sessions if s.is_completed
        )

    def __iter__(self) -> Iterator[LoadPoint]:
        return iter(self._points)

    def __len__(self) -> int:
        return len(self._points)


# ======================================================================
# Fold
# ======================================================================


def advance(
    state: FitnessFatigueState,
    load: float,
    days: float,
    config: FitnessFatigueConfig = DEFAULT_FITNESS_FATIGUE_CONFIG,
) -> FitnessFatigueState:
    """Decay *state* over *days* then add the impulse of *load*."""
    if days < 0:
        raise ValueError(f"elapsed days must be non-negative, got {days}")

    fitness = state.fitness * math.exp(-days / config.tau_fitness_days) + config.k_fitness * load
    fatigue = state.fatigue * math.exp(-days / config.tau_fatigue_days) + config.k_fatigue * load
    net = fitness - fatigue
    return FitnessFatigueState(
        fitness=fitness,
        fatigue=fatigue,
        net_performance=net,
        performance_score=performance_score(net),
        last_session_at=state.last_session_at,
        sessions_processed=state.sessions_processed + 1,
    )


def fold(
    state: FitnessFatigueState,
    point: LoadPoint,
    config: FitnessFatigueConfig = DEFAULT_FITNESS_FATIGUE_CONFIG,
) -> FitnessFatigueState:
    """Fold one session into *state*; the session must not predate it."""
    if state.last_session_at is None:
        days = 0.0
    else:
        if point.on < state.last_session_at:
            raise OutOfOrderSessionError(
                f"session at {point.on.isoformat()} predates state at {state.last_session_at.isoformat()}"
            )
        days = (point.on - state.last_session_at).total_seconds() / _SECONDS_PER_DAY

    advanced = advance(state, point.load, days, config)
    return advanced.model_copy(update={"last_session_at": point.on})


def replay(
    series: LoadSeries,
    config: FitnessFatigueConfig = DEFAULT_FITNESS_FATIGUE_CONFIG,
) -> FitnessFatigueState:
    """Replay *series* from the empty state."""
    state = empty_state()
    for point in series:
        state = fold(state, point, config)
    return state


def build_fitness_fatigue(
    sessions: Iterable[SessionRecord],
    config: FitnessFatigueConfig = DEFAULT_FITNESS_FATIGUE_CONFIG,
) -> FitnessFatigueState:
    """Rebuild the state from the completed sessions in *sessions*."""
    return replay(LoadSeries.from_sessions(sessions), config)


def is_available(
    state: Optional[FitnessFatigueState],
    config: FitnessFatigueConfig = DEFAULT_FITNESS_FATIGUE_CONFIG,
) -> bool:
    """Whether *state* is backed by enough sessions to be reported."""
    return state is not None and state.sessions_processed >= config.min_sessions
