"""Tests for workout logging."""

import logging
from dataclasses import replace

import pytest

from fitlog.services.workouts import (
    CUSTOM_WORKOUT_NAME,
    WorkoutService,
    calc_calories_burned,
    custom_met,
    find_template,
)
from tests.conftest import (
    ALICE,
    InMemoryProfileRepository,
    InMemoryWorkoutRepository,
)


@pytest.fixture
def workout_service(
    profile_repository: InMemoryProfileRepository,
    workout_repository: InMemoryWorkoutRepository,
) -> WorkoutService:
    return WorkoutService(
        workout_repository=workout_repository, profile_repository=profile_repository
    )


def test_calc_calories_burned() -> None:
    assert calc_calories_burned(6.0, 70, 30) == 221
    assert calc_calories_burned(7.0, 70, 30) == 257


def test_custom_met_lookup() -> None:
    assert custom_met("Cardio", "Hard") == 10.0
    assert custom_met("Strength", "Easy") == 3.0
    assert custom_met("Yoga", "Hard") == 5.0
    assert find_template("Jogging") is not None
    assert find_template("Moonwalking") is None


def test_log_library_workout_appends_to_bucket(
    workout_service: WorkoutService, workout_repository: InMemoryWorkoutRepository
) -> None:
    first = workout_service.log_library_workout("alice", "2024-01-05", "Jogging", 30)
    second = workout_service.log_library_workout(
        "alice", "2024-01-05", "Cycling (moderate)", 30
    )

    assert first.calories_burned == 257
    assert first.category == "Cardio"
    assert first.met == 7.0
    assert second.calories_burned == 221
    assert first.id != second.id
    assert workout_repository.get_bucket("alice", "2024-01-05") == [first, second]


def test_log_custom_workout(workout_service: WorkoutService) -> None:
    entry = workout_service.log_custom_workout(
        "alice", "2024-01-05", "  ", "Strength", "Hard", 45
    )

    assert entry.workout_name == CUSTOM_WORKOUT_NAME
    assert entry.met == 6.5
    assert entry.calories_burned == 358


def test_unknown_category_becomes_other(workout_service: WorkoutService) -> None:
    entry = workout_service.log_workout(
        "alice", "2024-01-05", "Yoga flow", "Yoga", 60, 2.5
    )

    assert entry.category == "Other"


def test_missing_weight_uses_fallback(
    workout_service: WorkoutService,
    profile_repository: InMemoryProfileRepository,
    caplog,
) -> None:
    profile_repository.save_profile(replace(ALICE, weight_kg=None))

    with caplog.at_level(logging.INFO):
        entry = workout_service.log_library_workout("alice", "2024-01-05", "Jogging", 30)

    assert entry.calories_burned == 257
    assert "No weight on profile" in caplog.text


def test_burn_is_frozen_after_weight_change(
    workout_service: WorkoutService,
    profile_repository: InMemoryProfileRepository,
) -> None:
    entry = workout_service.log_library_workout("alice", "2024-01-05", "Jogging", 30)
    profile_repository.save_profile(replace(ALICE, weight_kg=90))

    stored = workout_service.list_workouts("alice")["2024-01-05"][0]

    assert stored.calories_burned == entry.calories_burned == 257


@pytest.mark.parametrize(
    ("date", "duration", "met"),
    [("2024-01-05", 0, 5.0), ("2024-01-05", 30, 0), ("yesterday", 30, 5.0)],
)
def test_log_workout_validation(
    workout_service: WorkoutService, date: str, duration: float, met: float
) -> None:
    with pytest.raises(ValueError):
        workout_service.log_workout("alice", date, "Run", "Cardio", duration, met)


def test_log_workout_errors(workout_service: WorkoutService) -> None:
    with pytest.raises(ValueError):
        workout_service.log_library_workout("alice", "2024-01-05", "Moonwalking", 30)
    with pytest.raises(LookupError):
        workout_service.log_library_workout("nobody", "2024-01-05", "Jogging", 30)


def test_delete_workout_removes_empty_bucket(
    workout_service: WorkoutService, workout_repository: InMemoryWorkoutRepository
) -> None:
    entry = workout_service.log_library_workout("alice", "2024-01-05", "Jogging", 30)

    assert workout_service.delete_workout("alice", "2024-01-05", "missing") is False
    assert workout_service.delete_workout("alice", "2024-01-05", entry.id) is True
    assert "2024-01-05" not in workout_repository.buckets["alice"]
    assert workout_service.list_workouts("alice") == {}
