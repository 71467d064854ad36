"""Profile lifecycle: creation, edits and goal settings."""

from dataclasses import dataclass, replace
from typing import Protocol

from fitlog.domain.profiles import (
    DEFAULT_PREFERRED_DEFICIT,
    DEFAULT_WEEKLY_ACTIVE_MINUTES,
    DIET_CATEGORIES,
    GENDERS,
    Profile,
)

_EDITABLE_FIELDS = {
    "name",
    "age",
    "gender",
    "height_cm",
    "weight_kg",
    "diet_category",
    "goal_weight_kg",
}


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, username: str) -> Profile | None:
        """Return the profile for a username, if present."""

    def create_profile(self, profile: Profile) -> Profile:
        """Create and return a new profile."""

    def save_profile(self, profile: Profile) -> None:
        """Persist changes to an existing profile."""


@dataclass
class ProfileService:
    """Application service for profile actions."""

    repository: ProfileRepository

    def get_profile(self, username: str) -> Profile:
        """Return a profile or raise LookupError."""
        profile = self.repository.get_profile(username)
        if profile is None:
            raise LookupError(f"Unknown user: {username}")
        return profile

    def create_profile(self, username: str, **fields: object) -> Profile:
        """Create a profile on first sign-in; an existing profile is returned as is."""
        existing = self.repository.get_profile(username)
        if existing:
            return existing
        if not username.strip():
            raise ValueError("Username must not be blank")
        profile = _validated(Profile(username=username.strip(), **fields))
        return self.repository.create_profile(profile)

    def update_profile(self, username: str, changes: dict[str, object]) -> Profile:
        """Apply a partial profile edit. The username cannot change."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited: {sorted(unknown)}")
        updated = _validated(replace(self.get_profile(username), **changes))
        self.repository.save_profile(updated)
        return updated

    def update_goals(
        self,
        username: str,
        weekly_active_minutes_goal: int | None,
        preferred_deficit: int | None,
    ) -> Profile:
        """Save goal settings; empty or zero values fall back to the defaults."""
        updated = replace(
            self.get_profile(username),
            weekly_active_minutes_goal=int(weekly_active_minutes_goal or 0)
            or DEFAULT_WEEKLY_ACTIVE_MINUTES,
            preferred_deficit=int(preferred_deficit or 0) or DEFAULT_PREFERRED_DEFICIT,
        )
        self.repository.save_profile(updated)
        return updated


def _validated(profile: Profile) -> Profile:
    if profile.gender and profile.gender not in GENDERS:
        raise ValueError(f"Unknown gender: {profile.gender!r}")
    if profile.diet_category not in DIET_CATEGORIES:
        raise ValueError(f"Unknown diet category: {profile.diet_category!r}")
    for label, value in (
        ("age", profile.age),
        ("height_cm", profile.height_cm),
        ("weight_kg", profile.weight_kg),
        ("goal_weight_kg", profile.goal_weight_kg),
    ):
        if value is not None and value <= 0:
            raise ValueError(f"{label} must be positive, got {value}")
    return profile
