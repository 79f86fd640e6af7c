"""
Built-in exercise catalog.

Maps exercise slugs to the muscle groups they train.  The engine only
needs a lookup callable (:data:`~app.schemas.muscle_group.MuscleGroupLookup`);
:func:`muscle_groups_for` is the default one.  Exercises not in the
catalog are matched by keyword on their slug, and anything unrecognised
counts as ``full_body``.

To add a new exercise, call :func:`register_exercise` at import time.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.muscle_group import MuscleGroup


class ExerciseProfile(BaseModel):
    """Catalog entry describing a single exercise."""

    exercise_id: str = Field(..., description="Unique slug, e.g. 'back_squat'")
    display_name: str = Field(..., description="Human-readable name")
    muscle_groups: list[MuscleGroup] = Field(..., min_length=1, description="Primary muscle group first")
    category: str = Field(default="", description="Movement category, e.g. 'lower_body', 'upper_push'")


# ======================================================================
# Catalog storage
# ======================================================================

EXERCISE_CATALOG: dict[str, ExerciseProfile] = {}


def register_exercise(profile: ExerciseProfile) -> None:
    """Register an exercise profile in the global catalog."""
    EXERCISE_CATALOG[profile.exercise_id] = profile


def get_exercise(exercise_id: str) -> ExerciseProfile | None:
    """Look up an exercise by its ID.  Returns ``None`` if not found."""
    return EXERCISE_CATALOG.get(exercise_id)


# ======================================================================
# Built-in exercises
# ======================================================================

# Aliases for brevity in the table below
CH = MuscleGroup.CHEST
BK = MuscleGroup.BACK
UB = MuscleGroup.UPPER_BACK
LB = MuscleGroup.LOWER_BACK
SH = MuscleGroup.SHOULDERS
FD = MuscleGroup.FRONT_DELTS
RD = MuscleGroup.REAR_DELTS
TR = MuscleGroup.TRICEPS
BI = MuscleGroup.BICEPS
FA = MuscleGroup.FOREARMS
AB = MuscleGroup.ABS
QU = MuscleGroup.QUADS
HA = MuscleGroup.HAMSTRINGS
GL = MuscleGroup.GLUTES
CA = MuscleGroup.CALVES

_EXERCISES: list[ExerciseProfile] = [
    # ── Lower Body ────────────────────────────────────────────────
    ExerciseProfile(exercise_id="back_squat", display_name="Back Squat",
                    muscle_groups=[QU, GL, HA, LB], category="lower_body"),
    ExerciseProfile(exercise_id="front_squat", display_name="Front Squat",
                    muscle_groups=[QU, GL, UB], category="lower_body"),
    ExerciseProfile(exercise_id="deadlift", display_name="Deadlift",
                    muscle_groups=[HA, GL, LB, BK, FA], category="lower_body"),
    ExerciseProfile(exercise_id="romanian_deadlift", display_name="Romanian Deadlift",
                    muscle_groups=[HA, GL, LB], category="lower_body"),
    ExerciseProfile(exercise_id="leg_press", display_name="Leg Press",
                    muscle_groups=[QU, GL], category="lower_body"),
    ExerciseProfile(exercise_id="bulgarian_split_squat", display_name="Bulgarian Split Squat",
                    muscle_groups=[QU, GL, HA], category="lower_body"),
    ExerciseProfile(exercise_id="leg_extension", display_name="Leg Extension",
                    muscle_groups=[QU], category="lower_body"),
    ExerciseProfile(exercise_id="leg_curl", display_name="Leg Curl",
                    muscle_groups=[HA], category="lower_body"),
    ExerciseProfile(exercise_id="hip_thrust", display_name="Hip Thrust",
                    muscle_groups=[GL, HA], category="lower_body"),
    ExerciseProfile(exercise_id="calf_raise", display_name="Calf Raise",
                    muscle_groups=[CA], category="lower_body"),
    # ── Upper Push ────────────────────────────────────────────────
    ExerciseProfile(exercise_id="bench_press", display_name="Bench Press",
                    muscle_groups=[CH, TR, FD], category="upper_push"),
    ExerciseProfile(exercise_id="incline_db_press", display_name="Incline Dumbbell Press",
                    muscle_groups=[CH, FD, TR], category="upper_push"),
    ExerciseProfile(exercise_id="overhead_press", display_name="Overhead Press",
                    muscle_groups=[SH, FD, TR], category="upper_push"),
    ExerciseProfile(exercise_id="dip", display_name="Dip",
                    muscle_groups=[CH, TR, FD], category="upper_push"),
    ExerciseProfile(exercise_id="lateral_raise", display_name="Lateral Raise",
                    muscle_groups=[SH], category="upper_push"),
    ExerciseProfile(exercise_id="tricep_pushdown", display_name="Tricep Pushdown",
                    muscle_groups=[TR], category="upper_push"),
    # ── Upper Pull ────────────────────────────────────────────────
    ExerciseProfile(exercise_id="barbell_row", display_name="Barbell Row",
                    muscle_groups=[BK, UB, BI, RD], category="upper_pull"),
    ExerciseProfile(exercise_id="pull_up", display_name="Pull-Up",
                    muscle_groups=[BK, BI], category="upper_pull"),
    ExerciseProfile(exercise_id="lat_pulldown", display_name="Lat Pulldown",
                    muscle_groups=[BK, BI], category="upper_pull"),
    ExerciseProfile(exercise_id="bicep_curl", display_name="Bicep Curl",
                    muscle_groups=[BI, FA], category="upper_pull"),
    ExerciseProfile(exercise_id="face_pull", display_name="Face Pull",
                    muscle_groups=[RD, UB], category="upper_pull"),
    # ── Core / Carry ──────────────────────────────────────────────
    ExerciseProfile(exercise_id="plank", display_name="Plank",
                    muscle_groups=[AB], category="core"),
    ExerciseProfile(exercise_id="hanging_leg_raise", display_name="Hanging Leg Raise",
                    muscle_groups=[AB, FA], category="core"),
    ExerciseProfile(exercise_id="farmers_carry", display_name="Farmer's Carry",
                    muscle_groups=[FA, UB, AB], category="carry"),
]

for _ex in _EXERCISES:
    register_exercise(_ex)


# ======================================================================
# Lookup
# ======================================================================

# Checked in order against the slug; first match wins.
_KEYWORD_FALLBACK: list[tuple[tuple[str, ...], list[MuscleGroup]]] = [
    (("bench", "chest"), [CH, TR, SH]),
    (("squat", "leg_press", "leg press"), [QU, GL, HA]),
    (("deadlift",), [BK, HA, GL]),
    (("leg_extension", "leg extension"), [QU]),
    (("leg_curl", "leg curl"), [HA]),
    (("row", "pull"), [BK, BI]),
    (("overhead", "shoulder"), [SH, TR]),
    (("curl",), [BI]),
    (("tricep",), [TR]),
]


def muscle_groups_for(exercise_id: str) -> list[MuscleGroup]:
    """Muscle groups trained by *exercise_id* (``[full_body]`` when unknown)."""
    profile = get_exercise(exercise_id)
    if profile is not None:
        return list(profile.muscle_groups)

    name = exercise_id.lower()
    for keywords, muscles in _KEYWORD_FALLBACK:
        if any(k in name for k in keywords):
            return list(muscles)
    return [MuscleGroup.FULL_BODY]
