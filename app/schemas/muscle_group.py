"""
Muscle group reference data.

Each muscle group carries a base recovery window: the hours needed to
reach 95 % recovery after a session of moderate severity.  Larger and
more systemic muscles recover slower:

    quads / hamstrings / glutes / lower back:   72h
    chest / back / upper back:                  48h
    shoulders / delts / arms:                   36h
    abs / calves / forearms:                    24h

Unknown labels fall back to 48h.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Sequence


class MuscleGroup(str, Enum):
    """Enumerable muscle-group label."""

    CHEST = "chest"
    BACK = "back"
    UPPER_BACK = "upper_back"
    LOWER_BACK = "lower_back"
    SHOULDERS = "shoulders"
    FRONT_DELTS = "front_delts"
    REAR_DELTS = "rear_delts"
    TRICEPS = "triceps"
    BICEPS = "biceps"
    FOREARMS = "forearms"
    ABS = "abs"
    QUADS = "quads"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    FULL_BODY = "full_body"


DEFAULT_BASE_RECOVERY_HOURS = 48.0

BASE_RECOVERY_HOURS: dict[MuscleGroup, float] = {
    MuscleGroup.CHEST: 48.0,
    MuscleGroup.BACK: 48.0,
    MuscleGroup.UPPER_BACK: 48.0,
    MuscleGroup.LOWER_BACK: 72.0,
    MuscleGroup.SHOULDERS: 36.0,
    MuscleGroup.FRONT_DELTS: 36.0,
    MuscleGroup.REAR_DELTS: 36.0,
    MuscleGroup.TRICEPS: 36.0,
    MuscleGroup.BICEPS: 36.0,
    MuscleGroup.FOREARMS: 24.0,
    MuscleGroup.ABS: 24.0,
    MuscleGroup.QUADS: 72.0,
    MuscleGroup.HAMSTRINGS: 72.0,
    MuscleGroup.GLUTES: 72.0,
    MuscleGroup.CALVES: 24.0,
    MuscleGroup.FULL_BODY: 48.0,
}


def parse_muscle_group(value: MuscleGroup | str) -> MuscleGroup | None:
    """Normalise a label (``"Lower Back"``, ``"lower-back"``) to a :class:`MuscleGroup`."""
    if isinstance(value, MuscleGroup):
        return value
    slug = value.strip().lower().replace(" ", "_").replace("-", "_")
    try:
        return MuscleGroup(slug)
    except ValueError:
        return None


def base_recovery_hours(muscle_group: MuscleGroup | str) -> float:
    """Base hours to 95 % recovery for *muscle_group*."""
    group = parse_muscle_group(muscle_group)
    if group is None:
        return DEFAULT_BASE_RECOVERY_HOURS
    return BASE_RECOVERY_HOURS.get(group, DEFAULT_BASE_RECOVERY_HOURS)


# Exercise id -> muscle groups it trains.  Injected by the caller.
MuscleGroupLookup = Callable[[str], Sequence[MuscleGroup]]
