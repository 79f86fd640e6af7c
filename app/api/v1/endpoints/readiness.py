"""
Readiness endpoints — pre-workout readiness, set recommendations,
session fatigue and workout completion.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_athlete_id, get_readiness_service, get_store
from app.db.store import SqlStore
from app.engine.errors import StorageUnavailableError
from app.schemas.readiness import PreWorkoutReadiness
from app.schemas.recommendation import SetRecommendation, SetRecommendationRequest
from app.schemas.session_fatigue import SessionFatigueAssessment, SessionFatigueRequest
from app.schemas.workout import SessionRecord
from app.services.readiness_service import ReadinessService

router = APIRouter()


@router.get(
    "/pre-workout",
    summary="Get pre-workout readiness (ACWR, fitness-fatigue, per-muscle readiness).",
    response_model=PreWorkoutReadiness,
)
def get_pre_workout_readiness(
    planned: Optional[list[str]] = Query(None, description="Planned exercise ids"),
    as_of: Optional[datetime.datetime] = Query(
        None, description="Reference datetime; UTC offsets are converted, naive values are UTC (defaults to now)",
    ),
    athlete_id: str = Depends(get_athlete_id),
    service: ReadinessService = Depends(get_readiness_service),
):
    return service.get_pre_workout_readiness(athlete_id, planned_exercises=planned, as_of=as_of)


@router.post(
    "/set-recommendation",
    summary="Recommend weight and reps for the next set.",
    response_model=SetRecommendation,
)
def get_set_recommendation(
    data: SetRecommendationRequest,
    athlete_id: str = Depends(get_athlete_id),
    service: ReadinessService = Depends(get_readiness_service),
):
    return service.get_set_recommendation(
        athlete_id,
        data.exercise_id,
        data.set_number,
        data.target_reps,
        target_rpe=data.target_rpe,
        completed_session_sets=data.completed_session_sets,
        prescribed_weight=data.prescribed_weight,
    )


@router.post(
    "/session-fatigue",
    summary="Assess fatigue of the in-progress session.",
    response_model=SessionFatigueAssessment,
)
def assess_session_fatigue(
    data: SessionFatigueRequest,
    service: ReadinessService = Depends(get_readiness_service),
):
    return service.assess_session_fatigue(data.completed_session_sets)


@router.post(
    "/workouts/complete",
    summary="Record a completed workout and refresh the athlete's models.",
    status_code=status.HTTP_204_NO_CONTENT,
)
def complete_workout(
    data: SessionRecord,
    athlete_id: str = Depends(get_athlete_id),
    store: SqlStore = Depends(get_store),
    service: ReadinessService = Depends(get_readiness_service),
):
    if not data.is_completed:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Session has no ended_at")
    try:
        inserted = store.save_session(athlete_id, data)
    except StorageUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    # Resubmitting a recorded workout is a no-op.
    if inserted:
        service.record_workout_completion(athlete_id, data)
