"""Tests for the profile service."""

import pytest

from fitlog.services.profiles import ProfileService
from tests.conftest import ALICE, InMemoryProfileRepository


@pytest.fixture
def profile_service(profile_repository: InMemoryProfileRepository) -> ProfileService:
    return ProfileService(profile_repository)


def test_create_profile_on_first_sign_in(
    profile_service: ProfileService, profile_repository: InMemoryProfileRepository
) -> None:
    profile = profile_service.create_profile(
        " bob ", name="Bob", age=41, gender="male", weight_kg=88.0
    )

    assert profile.username == "bob"
    assert profile.weekly_active_minutes_goal == 150
    assert profile.preferred_deficit == 500
    assert profile_repository.profiles["bob"] == profile


def test_create_profile_returns_existing(profile_service: ProfileService) -> None:
    profile = profile_service.create_profile("alice", name="Someone else")

    assert profile == ALICE


@pytest.mark.parametrize(
    "fields",
    [{"gender": "robot"}, {"diet_category": "Carnivore"}, {"age": 0}, {"weight_kg": -2}],
)
def test_create_profile_validation(
    profile_service: ProfileService, fields: dict[str, object]
) -> None:
    with pytest.raises(ValueError):
        profile_service.create_profile("carol", **fields)


def test_update_profile(profile_service: ProfileService) -> None:
    updated = profile_service.update_profile(
        "alice", {"weight_kg": 68.5, "diet_category": "Vegetarian"}
    )

    assert updated.weight_kg == 68.5
    assert updated.diet_category == "Vegetarian"
    assert profile_service.get_profile("alice") == updated


def test_update_profile_rejects_username_change(
    profile_service: ProfileService,
) -> None:
    with pytest.raises(ValueError):
        profile_service.update_profile("alice", {"username": "mallory"})


def test_update_goals_defaults(profile_service: ProfileService) -> None:
    updated = profile_service.update_goals("alice", 200, 300)
    reset = profile_service.update_goals("alice", 0, None)

    assert updated.weekly_active_minutes_goal == 200
    assert updated.preferred_deficit == 300
    assert reset.weekly_active_minutes_goal == 150
    assert reset.preferred_deficit == 500


def test_unknown_user(profile_service: ProfileService) -> None:
    with pytest.raises(LookupError):
        profile_service.get_profile("nobody")
    with pytest.raises(LookupError):
        profile_service.update_goals("nobody", 100, 100)
