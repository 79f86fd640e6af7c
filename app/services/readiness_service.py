"""
Readiness service — facade over the recovery and readiness engine.

Exposes the four engine operations to callers:

- :meth:`ReadinessService.get_pre_workout_readiness`
- :meth:`ReadinessService.get_set_recommendation`
- :meth:`ReadinessService.assess_session_fatigue`
- :meth:`ReadinessService.record_workout_completion`

Every longitudinal model is read through the per-athlete
:class:`~app.engine.cache.ModelCache` inside a
:class:`~app.engine.degradation.DegradationPolicy` guard, so a storage
outage degrades that one model to its fallback instead of failing the
call.  History is fetched lazily, at most once per request, and bounded
to the last ``history_days`` days.

Cached models describe the athlete at the service clock's "now".  A
request for any other ``as_of`` bypasses the cache in both directions,
so results for a given timestamp never depend on earlier calls.  Models
built while a secondary input (the fatigue snapshot log) was unavailable
are returned but not cached.  ``as_of`` values carrying a UTC offset are
converted to naive UTC.
"""

from __future__ import annotations

import datetime
import logging
from typing import Callable, Iterable, Optional, Sequence

from pydantic import BaseModel, Field

from app.core.clock import as_naive_utc, utcnow
from app.engine.acwr import ACWRConfig, compute_acwr_from_sessions, unknown_acwr
from app.engine.advisor import readiness_confidence, summarise
from app.engine.cache import ModelCache
from app.engine.degradation import DegradationPolicy
from app.engine.errors import StorageUnavailableError
from app.engine.fitness_fatigue import (
    FitnessFatigueConfig,
    build_fitness_fatigue,
    default_state,
    is_available,
)
from app.engine.hierarchical import (
    HierarchicalConfig,
    build_hierarchical_model,
    nudged_rate,
    population_model,
)
from app.engine.readiness import (
    build_recovery_profile,
    derive_training_states,
    fatigue_snapshots_for_session,
    rank_least_ready,
    to_muscle_readiness,
)
from app.engine.recommendation import RecommendationConfig, recommend_set, resolve_baseline
from app.engine.recovery_curve import RecoveryConfig
from app.engine.session_fatigue import SessionFatigueConfig, assess_session_fatigue
from app.engine.storage import HistoryStore
from app.exercises.catalog import muscle_groups_for
from app.schemas.acwr import ACWRResult
from app.schemas.fitness_fatigue import FitnessFatigueState
from app.schemas.hierarchical import HierarchicalFatigueModel
from app.schemas.model_cache import ModelKind
from app.schemas.muscle_group import MuscleGroup, MuscleGroupLookup
from app.schemas.readiness import PreWorkoutReadiness
from app.schemas.recommendation import SetRecommendation
from app.schemas.recovery import RecoveryProfile, RecoveryStateSet
from app.schemas.session_fatigue import SessionFatigueAssessment
from app.schemas.workout import SessionRecord, SetRecord

logger = logging.getLogger(__name__)

# Degradation source names.
SOURCE_HISTORY = "history"
SOURCE_ACWR = ModelKind.ACWR.value
SOURCE_FITNESS_FATIGUE = ModelKind.FITNESS_FATIGUE.value
SOURCE_HIERARCHICAL = ModelKind.HIERARCHICAL.value
SOURCE_RECOVERY = ModelKind.RECOVERY_PROFILES.value
SOURCE_FATIGUE_HISTORY = "fatigue_history"


class ServiceConfig(BaseModel):
    """All model configurations plus the service-level windows."""

    recovery: RecoveryConfig = Field(default_factory=RecoveryConfig)
    acwr: ACWRConfig = Field(default_factory=ACWRConfig)
    fitness_fatigue: FitnessFatigueConfig = Field(default_factory=FitnessFatigueConfig)
    hierarchical: HierarchicalConfig = Field(default_factory=HierarchicalConfig)
    session_fatigue: SessionFatigueConfig = Field(default_factory=SessionFatigueConfig)
    recommendation: RecommendationConfig = Field(default_factory=RecommendationConfig)

    history_days: int = Field(90, ge=28, description="Upper bound on any history scan")
    cache_ttl_seconds: int = Field(300, ge=0)

    @classmethod
    def from_settings(cls, settings) -> "ServiceConfig":
        return cls(
            recommendation=RecommendationConfig(default_weight=settings.DEFAULT_BASELINE_WEIGHT),
            history_days=settings.HISTORY_LOOKBACK_DAYS,
            cache_ttl_seconds=settings.MODEL_CACHE_TTL_SECONDS,
        )


class _Request:
    """Per-call state: evaluation time, degradation policy and lazy history."""

    def __init__(
        self,
        service: "ReadinessService",
        athlete_id: str,
        as_of: Optional[datetime.datetime] = None,
    ) -> None:
        now = service.clock()
        self.service = service
        self.athlete_id = athlete_id
        self.as_of = now if as_of is None else as_naive_utc(as_of)
        # Cached models describe "now"; any other evaluation time is computed fresh.
        self.use_cache = self.as_of == now
        self.policy = DegradationPolicy()
        self._sessions: Optional[list[SessionRecord]] = None
        self._failure: Optional[StorageUnavailableError] = None

    def sessions(self) -> list[SessionRecord]:
        """Sessions in the history window, oldest first.  Fetched once."""
        if self._failure is not None:
            raise self._failure
        if self._sessions is None:
            since = self.as_of - datetime.timedelta(days=self.service.config.history_days)
            try:
                fetched = self.service.history.list_sessions(self.athlete_id, since)
            except StorageUnavailableError as exc:
                self._failure = exc
                raise
            self._sessions = sorted(
                (s for s in fetched if s.performed_at <= self.as_of),
                key=lambda s: s.performed_at,
            )
        return self._sessions

    def _cached(self, kind: ModelKind, compute: Callable, fallback: Callable):
        if not self.use_cache:
            return self.policy.guard(kind.value, compute, fallback)

        degraded_before = len(self.policy.degraded_sources)

        def complete(_model) -> bool:
            # A model built around a degraded input is served but never stored.
            return len(self.policy.degraded_sources) == degraded_before

        return self.policy.guard(
            kind.value,
            lambda: self.service.cache.get_or_compute(self.athlete_id, kind, compute, should_store=complete),
            fallback,
        )

    def acwr(self) -> ACWRResult:
        config = self.service.config.acwr
        return self._cached(
            ModelKind.ACWR,
            lambda: compute_acwr_from_sessions(self.sessions(), self.as_of, config),
            lambda: unknown_acwr(self.as_of),
        )

    def fitness_fatigue(self) -> FitnessFatigueState:
        config = self.service.config.fitness_fatigue
        return self._cached(
            ModelKind.FITNESS_FATIGUE,
            lambda: build_fitness_fatigue(self.sessions(), config),
            lambda: default_state(config),
        )

    def hierarchical(self) -> HierarchicalFatigueModel:
        config = self.service.config.hierarchical
        return self._cached(
            ModelKind.HIERARCHICAL,
            lambda: build_hierarchical_model(self.sessions(), self.as_of, config),
            lambda: population_model(self.as_of, config),
        )

    def recovery_states(self) -> RecoveryStateSet:
        return self._cached(
            ModelKind.RECOVERY_PROFILES,
            self._derive_recovery_states,
            lambda: RecoveryStateSet(computed_at=self.as_of),
        )

    def _derive_recovery_states(self) -> RecoveryStateSet:
        service = self.service
        config = service.config.recovery

        def recent_scores(muscle: MuscleGroup) -> list[float]:
            # Without stored snapshots the per-session scores stand in.
            return self.policy.guard(
                SOURCE_FATIGUE_HISTORY,
                lambda: [
                    s.fatigue_score
                    for s in service.history.list_recent_fatigue_snapshots(
                        self.athlete_id, muscle, config.snapshot_limit,
                    )
                ],
                list,
            )

        states = derive_training_states(
            self.sessions(), service.muscle_lookup, self.as_of, recent_scores, config,
        )
        return RecoveryStateSet(states=states, computed_at=self.as_of)

    def recovery_profiles(self) -> dict[MuscleGroup, RecoveryProfile]:
        config = self.service.config.recovery
        return {
            st.muscle_group: build_recovery_profile(st, self.as_of, config)
            for st in self.recovery_states().states
        }

    def history_sets(self) -> list[SetRecord]:
        return self.policy.guard(
            SOURCE_HISTORY,
            lambda: [s for session in self.sessions() if session.is_completed for s in session.completed_sets()],
            list,
        )


class ReadinessService:
    """Service for readiness, recommendation and fatigue queries."""

    def __init__(
        self,
        history: HistoryStore,
        cache: ModelCache,
        muscle_lookup: MuscleGroupLookup = muscle_groups_for,
        config: Optional[ServiceConfig] = None,
        clock: Callable[[], datetime.datetime] = utcnow,
    ):
        self.history = history
        self.cache = cache
        self.muscle_lookup = muscle_lookup
        self.config = config or ServiceConfig()
        self.clock = clock

    def _planned_muscles(self, planned_exercises: Iterable[str]) -> set[MuscleGroup]:
        muscles: set[MuscleGroup] = set()
        for exercise_id in planned_exercises:
            muscles.update(self.muscle_lookup(exercise_id))
        return muscles

    # ------------------------------------------------------------------
    # Pre-workout readiness
    # ------------------------------------------------------------------

    def get_pre_workout_readiness(
        self,
        athlete_id: str,
        planned_exercises: Optional[Sequence[str]] = None,
        as_of: Optional[datetime.datetime] = None,
    ) -> PreWorkoutReadiness:
        request = _Request(self, athlete_id, as_of)
        policy = request.policy
        recovery_config = self.config.recovery

        acwr = request.acwr()
        ff_state = request.fitness_fatigue()
        hierarchical = request.hierarchical()
        profiles = request.recovery_profiles()

        if planned_exercises:
            wanted = self._planned_muscles(planned_exercises)
            profiles = {m: p for m, p in profiles.items() if m in wanted}
        muscles = rank_least_ready(to_muscle_readiness(p, request.as_of, recovery_config) for p in profiles.values())

        acwr_available = not policy.is_degraded(SOURCE_ACWR) and acwr.has_sufficient_history
        ff_available = not policy.is_degraded(SOURCE_FITNESS_FATIGUE) and is_available(
            ff_state, self.config.fitness_fatigue,
        )
        hierarchical_available = (
            not policy.is_degraded(SOURCE_HIERARCHICAL)
            and hierarchical.total_sessions >= hierarchical.min_sample_size
        )
        recovery_available = not policy.is_degraded(SOURCE_RECOVERY) and bool(profiles)

        displayed = ff_state if ff_available else default_state(self.config.fitness_fatigue)
        score, status, warnings, recommendations = summarise(
            acwr if acwr_available else None,
            ff_state if ff_available else None,
            displayed,
            muscles,
        )
        if policy.degraded:
            warnings.append("Some training history could not be loaded. Readiness is less certain than usual.")

        return PreWorkoutReadiness(
            overall_score=score,
            overall_status=status,
            acwr=acwr.acwr,
            acwr_status=acwr.status,
            fitness_score=round(displayed.fitness, 2),
            fatigue_score=round(displayed.fatigue, 2),
            performance_score=round(displayed.performance_score, 1),
            muscle_readiness=muscles,
            warnings=warnings,
            recommendations=recommendations,
            confidence=readiness_confidence(
                hierarchical_available, ff_available, acwr_available, recovery_available,
            ),
            degraded_sources=list(policy.degraded_sources),
        )

    # ------------------------------------------------------------------
    # Set recommendation
    # ------------------------------------------------------------------

    def get_set_recommendation(
        self,
        athlete_id: str,
        exercise_id: str,
        set_number: int,
        target_reps: int,
        target_rpe: Optional[float] = None,
        completed_session_sets: Sequence[SetRecord] = (),
        prescribed_weight: Optional[float] = None,
        as_of: Optional[datetime.datetime] = None,
    ) -> SetRecommendation:
        request = _Request(self, athlete_id, as_of)
        rec_config = self.config.recommendation
        session_sets = [s for s in completed_session_sets if s.completed]

        assessment = self.assess_session_fatigue(session_sets)

        hierarchical = request.hierarchical()
        rate = nudged_rate(hierarchical, exercise_id, session_sets, self.config.hierarchical)

        profiles = request.recovery_profiles()
        scores = [
            profiles[m].readiness_score if m in profiles else rec_config.default_readiness
            for m in self.muscle_lookup(exercise_id)
        ]
        readiness = sum(scores) / len(scores) if scores else rec_config.default_readiness

        acwr = request.acwr()

        baseline = resolve_baseline(
            exercise_id,
            target_reps,
            target_rpe,
            session_sets=session_sets,
            history_sets=request.history_sets(),
            prescribed_weight=prescribed_weight,
            config=rec_config,
        )

        recommendation = recommend_set(
            exercise_id,
            set_number,
            target_reps,
            baseline,
            muscle_readiness=readiness,
            acwr=acwr.acwr,
            session_fatigue=assessment.overall_fatigue,
            exercise_fatigue_rate=rate,
            fatigue_alert=assessment.alert,
            degraded_sources=request.policy.degraded_sources,
            config=rec_config,
        )
        logger.debug(
            "Set recommendation for %s/%s set %d: %.1f (%s, %d adjustments)",
            athlete_id, exercise_id, set_number, recommendation.suggested_weight,
            baseline.source, len(recommendation.adjustments),
        )
        return recommendation

    # ------------------------------------------------------------------
    # Session fatigue
    # ------------------------------------------------------------------

    def assess_session_fatigue(self, completed_session_sets: Sequence[SetRecord]) -> SessionFatigueAssessment:
        return assess_session_fatigue(completed_session_sets, self.muscle_lookup, self.config.session_fatigue)

    # ------------------------------------------------------------------
    # Workout completion
    # ------------------------------------------------------------------

    def record_workout_completion(self, athlete_id: str, session: SessionRecord) -> None:
        """Append fatigue snapshots for *session* and invalidate the athlete's models."""
        policy = DegradationPolicy()
        try:
            snapshots = fatigue_snapshots_for_session(athlete_id, session, self.muscle_lookup)
            if snapshots:
                policy.guard(
                    SOURCE_FATIGUE_HISTORY,
                    lambda: self.history.append_fatigue_snapshots(athlete_id, snapshots),
                    lambda: None,
                )
            logger.info(
                "Recorded workout %s for athlete %s: %d fatigue snapshots",
                session.session_id, athlete_id, len(snapshots),
            )
        finally:
            self.cache.invalidate(athlete_id)


def build_readiness_service(history: HistoryStore, model_store, settings) -> ReadinessService:
    """Wire a service from settings, a history store and a model store."""
    config = ServiceConfig.from_settings(settings)
    return ReadinessService(history, ModelCache(model_store, config.cache_ttl_seconds), config=config)
