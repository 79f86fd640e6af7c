"""Default exercise → muscle-group lookup."""

from app.exercises.catalog import ExerciseProfile, get_exercise, muscle_groups_for, register_exercise

__all__ = ["ExerciseProfile", "get_exercise", "muscle_groups_for", "register_exercise"]
