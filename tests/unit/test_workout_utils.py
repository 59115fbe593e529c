"""
Unit tests for workout helpers.
"""

from types import SimpleNamespace

from fitcoach.utils.workout import (
    calculate_workout_duration,
    extract_muscle_groups,
    format_workout_duration,
    get_difficulty_text,
    validate_exercise,
    validate_workout_plan,
)


class TestWorkoutDuration:
    def test_duration_from_sets_and_rest(self):
        exercises = [
            {"target_sets": 3, "rest_seconds": 60},
            {"target_sets": 4, "rest_seconds": 90},
        ]
        # 3 * (60 + 60) + 4 * (60 + 90) = 960 seconds
        assert calculate_workout_duration(exercises) == 16

    def test_missing_rest_defaults_to_a_minute(self):
        assert calculate_workout_duration([SimpleNamespace(target_sets=2, rest_seconds=None)]) == 4

    def test_empty(self):
        assert calculate_workout_duration([]) == 0
        assert calculate_workout_duration(None) == 0

    def test_format(self):
        assert format_workout_duration(45) == "45min"
        assert format_workout_duration(60) == "1h"
        assert format_workout_duration(95) == "1h 35min"


class TestValidation:
    def test_valid_plan(self):
        plan = {
            "name": "Push day",
            "description": "Chest, shoulders and triceps",
            "difficulty_level": 3,
            "muscle_groups": ["chest"],
            "estimated_duration_minutes": 45,
        }
        assert validate_workout_plan(plan) == []

    def test_invalid_plan_collects_every_error(self):
        """
        Test workout plan validation.

        This test ensures that every failing rule is reported, not only
        the first one.
        """
        errors = validate_workout_plan({
            "name": "ab",
            "description": "short",
            "difficulty_level": 7,
            "muscle_groups": [],
            "estimated_duration_minutes": 5,
        })
        assert errors == [
            "Workout name must have at least 3 characters",
            "Description must have at least 10 characters",
            "Difficulty level must be between 1 and 5",
            "Select at least one muscle group",
            "Estimated duration must be at least 10 minutes",
        ]

    def test_invalid_exercise(self):
        errors = validate_exercise(SimpleNamespace(
            name="Squat",
            description="Barbell back squat",
            muscle_groups=["legs"],
            equipment="",
            difficulty_level=2,
            instructions="Go down",
        ))
        assert errors == [
            "Specify the required equipment",
            "Instructions must have at least 20 characters",
        ]


class TestDisplay:
    def test_extract_muscle_groups_keeps_first_seen_order(self):
        plan_exercises = [
            {"exercise": {"muscle_groups": ["chest", "triceps"]}},
            {"exercise": {"muscle_groups": ["triceps", "shoulders"]}},
            {"exercise": None},
        ]
        assert extract_muscle_groups(plan_exercises) == ["chest", "triceps", "shoulders"]

    def test_difficulty_text(self):
        assert get_difficulty_text(1) == "Beginner"
        assert get_difficulty_text(5) == "Expert"
        assert get_difficulty_text(9) == "Undefined"
