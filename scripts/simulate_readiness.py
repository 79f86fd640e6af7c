"""Simulate readiness and set recommendations from a block of logged training.

Usage:
    python scripts/simulate_readiness.py
"""

import datetime
import sys
from collections import defaultdict
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.engine.cache import InMemoryModelStore, ModelCache
from app.engine.storage import InMemoryHistoryStore
from app.schemas.workout import SessionRecord, SetRecord
from app.services.readiness_service import ReadinessService

ATHLETE_ID = "sim-athlete"

# ─── Logged exercise name → catalog ID ──────────────────────────────
EXERCISE_MAP = {
    "Conventional Barbell Deadlift": "deadlift",
    "Barbell Back Squat": "back_squat",
    "Barbell Overhead Press": "overhead_press",
    "Barbell Flat Bench Press": "bench_press",
    "Weighted Pull-up": "pull_up",
    "Barbell Row": "barbell_row",
    "Farmer's Carry": "farmers_carry",
}

# (date, exercise, weight_kg, reps, rpe)
RAW_DATA = [
    # Jan 5 - Deadlift day
    ("2026-01-05", "Conventional Barbell Deadlift", 60, 5, 6.0),
    ("2026-01-05", "Conventional Barbell Deadlift", 75, 3, 7.0),
    ("2026-01-05", "Conventional Barbell Deadlift", 75, 3, 7.5),
    ("2026-01-05", "Conventional Barbell Deadlift", 75, 3, 8.0),
    ("2026-01-05", "Barbell Row", 50, 8, 7.0),
    ("2026-01-05", "Barbell Row", 50, 8, 8.0),
    ("2026-01-05", "Farmer's Carry", 60, 1, None),
    # Jan 10 - Squat/Press day
    ("2026-01-10", "Barbell Back Squat", 60, 6, 6.5),
    ("2026-01-10", "Barbell Back Squat", 70, 5, 7.5),
    ("2026-01-10", "Barbell Back Squat", 70, 5, 8.0),
    ("2026-01-10", "Barbell Overhead Press", 30, 5, 7.0),
    ("2026-01-10", "Barbell Overhead Press", 32.5, 4, 8.5),
    ("2026-01-10", "Barbell Flat Bench Press", 45, 5, 7.0),
    ("2026-01-10", "Barbell Flat Bench Press", 50, 4, 8.0),
    ("2026-01-10", "Barbell Flat Bench Press", 52.5, 3, 9.0),
    # Jan 16 - Deadlift day
    ("2026-01-16", "Weighted Pull-up", 0, 7, 7.0),
    ("2026-01-16", "Weighted Pull-up", 0, 5, 8.0),
    ("2026-01-16", "Conventional Barbell Deadlift", 75, 3, 7.0),
    ("2026-01-16", "Conventional Barbell Deadlift", 80, 3, 8.0),
    ("2026-01-16", "Conventional Barbell Deadlift", 85, 3, 9.0),
    ("2026-01-16", "Barbell Row", 55, 8, 7.5),
    ("2026-01-16", "Barbell Row", 55, 7, 8.5),
    # Jan 26 - Squat/Press day
    ("2026-01-26", "Barbell Back Squat", 60, 8, 6.0),
    ("2026-01-26", "Barbell Back Squat", 72.5, 5, 7.5),
    ("2026-01-26", "Barbell Back Squat", 72.5, 5, 8.0),
    ("2026-01-26", "Barbell Overhead Press", 30, 5, 7.5),
    ("2026-01-26", "Barbell Overhead Press", 30, 4, 8.5),
    ("2026-01-26", "Barbell Flat Bench Press", 42.5, 5, 7.0),
    ("2026-01-26", "Barbell Flat Bench Press", 42.5, 5, 8.0),
    # Jan 31 - Deadlift day
    ("2026-01-31", "Conventional Barbell Deadlift", 70, 3, 6.5),
    ("2026-01-31", "Conventional Barbell Deadlift", 85, 2, 8.0),
    ("2026-01-31", "Conventional Barbell Deadlift", 85, 2, 8.5),
    ("2026-01-31", "Conventional Barbell Deadlift", 85, 2, 9.0),
    ("2026-01-31", "Barbell Row", 60, 6, 8.0),
    ("2026-01-31", "Barbell Row", 60, 5, 9.0),
    ("2026-01-31", "Farmer's Carry", 65, 1, None),
]

# Sessions end one hour after 18:00.
SESSION_START = datetime.time(18, 0)
SESSION_LENGTH = datetime.timedelta(hours=1)


def build_sessions() -> list[SessionRecord]:
    sets_by_date: dict[str, list[SetRecord]] = defaultdict(list)
    for date, exercise, weight_kg, reps, rpe in RAW_DATA:
        day_sets = sets_by_date[date]
        exercise_id = EXERCISE_MAP[exercise]
        index = sum(1 for s in day_sets if s.exercise_id == exercise_id)
        day_sets.append(
            SetRecord(
                exercise_id=exercise_id,
                set_index=index,
                actual_weight=weight_kg,
                actual_reps=reps,
                actual_rpe=rpe,
            )
        )

    sessions = []
    for date in sorted(sets_by_date):
        started = datetime.datetime.combine(datetime.date.fromisoformat(date), SESSION_START)
        sessions.append(
            SessionRecord(
                session_id=f"sim-{date}",
                started_at=started,
                ended_at=started + SESSION_LENGTH,
                sets=sets_by_date[date],
            )
        )
    return sessions


def main():
    history = InMemoryHistoryStore()
    sessions = build_sessions()
    as_of = sessions[-1].ended_at + datetime.timedelta(hours=40)
    service = ReadinessService(history, ModelCache(InMemoryModelStore(clock=lambda: as_of)), clock=lambda: as_of)

    for session in sessions:
        history.add_session(ATHLETE_ID, session)
        service.record_workout_completion(ATHLETE_ID, session)

    readiness = service.get_pre_workout_readiness(ATHLETE_ID, ["bench_press", "back_squat"])

    print()
    print("=" * 70)
    print(f"Readiness as of {as_of:%Y-%m-%d %H:%M}")
    print("=" * 70)
    print(f"Overall:      {readiness.overall_score:.1f}/10 ({readiness.overall_status})")
    print(f"ACWR:         {readiness.acwr:.2f} ({readiness.acwr_status})")
    print(f"Fitness:      {readiness.fitness_score:.2f}   Fatigue: {readiness.fatigue_score:.2f}")
    print(f"Performance:  {readiness.performance_score:.1f}/100")
    print(f"Confidence:   {readiness.confidence:.2f}")
    print()
    print(f"{'Muscle':<14} {'Score':>6} {'Recovery':>9} {'Status':<11} {'Ready in':>9}")
    print("-" * 70)
    for m in readiness.muscle_readiness:
        ready_in = f"{m.hours_until_ready:.0f}h" if m.hours_until_ready is not None else "-"
        print(f"{m.muscle.value:<14} {m.score:>6.1f} {m.recovery_percentage:>8.1f}% {m.status:<11} {ready_in:>9}")

    for warning in readiness.warnings:
        print(f"  ! {warning}")
    for recommendation in readiness.recommendations:
        print(f"  > {recommendation}")

    print()
    print("=" * 70)
    print("Next bench press session")
    print("=" * 70)
    done: list[SetRecord] = []
    for set_number in range(1, 4):
        rec = service.get_set_recommendation(
            ATHLETE_ID, "bench_press", set_number, target_reps=5, target_rpe=8.0, completed_session_sets=done,
        )
        print(f"Set {set_number}: {rec.suggested_weight:.1f} x {rec.suggested_reps} ({rec.confidence}) - {rec.reasoning}")
        done.append(
            SetRecord(
                exercise_id="bench_press",
                set_index=set_number - 1,
                prescribed_rpe=8.0,
                actual_weight=rec.suggested_weight,
                actual_reps=5,
                actual_rpe=8.0 + set_number * 0.5,
            )
        )

    fatigue = service.assess_session_fatigue(done)
    print()
    print(f"Session fatigue: {fatigue.overall_fatigue:.1f}/100 ({fatigue.severity}) - {fatigue.reasoning}")


if __name__ == "__main__":
    main()
