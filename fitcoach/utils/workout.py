"""Workout helpers: duration estimates, validation and display text."""

from typing import Iterable, List, Mapping, Optional, Sequence

SECONDS_PER_SET = 60
DEFAULT_REST_SECONDS = 60

DIFFICULTY_TEXT = {
    1: "Beginner",
    2: "Easy",
    3: "Intermediate",
    4: "Advanced",
    5: "Expert",
}


def _get(obj, name: str, default=None):
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def calculate_workout_duration(exercises: Optional[Sequence]) -> int:
    """Estimated minutes for a list of plan exercises.

    Each set takes a minute of work plus the exercise's rest (60 s when unset).
    """
    if not exercises:
        return 0
    total_seconds = 0
    for exercise in exercises:
        rest = _get(exercise, "rest_seconds") or DEFAULT_REST_SECONDS
        sets = _get(exercise, "target_sets") or 0
        total_seconds += (SECONDS_PER_SET + rest) * sets
    return int(round(total_seconds / 60))


def _too_short(value: Optional[str], minimum: int) -> bool:
    return not value or len(value.strip()) < minimum


def _bad_difficulty(level) -> bool:
    return not level or level < 1 or level > 5


def validate_workout_plan(plan) -> List[str]:
    errors: List[str] = []

    if _too_short(_get(plan, "name"), 3):
        errors.append("Workout name must have at least 3 characters")

    if _too_short(_get(plan, "description"), 10):
        errors.append("Description must have at least 10 characters")

    if _bad_difficulty(_get(plan, "difficulty_level")):
        errors.append("Difficulty level must be between 1 and 5")

    if not _get(plan, "muscle_groups"):
        errors.append("Select at least one muscle group")

    duration = _get(plan, "estimated_duration_minutes")
    if duration and duration < 10:
        errors.append("Estimated duration must be at least 10 minutes")

    return errors


def validate_exercise(exercise) -> List[str]:
    errors: List[str] = []

    if _too_short(_get(exercise, "name"), 3):
        errors.append("Exercise name must have at least 3 characters")

    if _too_short(_get(exercise, "description"), 10):
        errors.append("Description must have at least 10 characters")

    if not _get(exercise, "muscle_groups"):
        errors.append("Select at least one muscle group")

    if _too_short(_get(exercise, "equipment"), 2):
        errors.append("Specify the required equipment")

    if _bad_difficulty(_get(exercise, "difficulty_level")):
        errors.append("Difficulty level must be between 1 and 5")

    if _too_short(_get(exercise, "instructions"), 20):
        errors.append("Instructions must have at least 20 characters")

    return errors


def extract_muscle_groups(exercises: Iterable) -> List[str]:
    """Distinct muscle groups of the exercises, in first-seen order."""
    groups: List[str] = []
    for plan_exercise in exercises:
        exercise = _get(plan_exercise, "exercise")
        for group in (_get(exercise, "muscle_groups") if exercise is not None else None) or []:
            if group not in groups:
                groups.append(group)
    return groups


def format_workout_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes}min"
    hours, remaining = divmod(minutes, 60)
    if remaining == 0:
        return f"{hours}h"
    return f"{hours}h {remaining}min"


def get_difficulty_text(level: int) -> str:
    return DIFFICULTY_TEXT.get(level, "Undefined")
