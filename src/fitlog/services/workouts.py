"""Workout logging with MET-based calorie estimates."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from fitlog.domain.workouts import (
    CATEGORY_ORDER,
    DEFAULT_MET,
    INTENSITY_METS,
    OTHER,
    WORKOUT_LIBRARY,
    WorkoutEntry,
    WorkoutTemplate,
)
from fitlog.services.macros import round_half_up
from fitlog.services.meals import parse_log_date
from fitlog.services.profiles import ProfileRepository

FALLBACK_WEIGHT_KG = 70.0
CUSTOM_WORKOUT_NAME = "Custom workout"

_logger = logging.getLogger(__name__)


class WorkoutRepository(Protocol):
    """Persistence interface for per-date workout buckets."""

    def list_workouts(self, username: str) -> dict[str, list[WorkoutEntry]]:
        """Return every non-empty bucket keyed by date."""

    def get_bucket(self, username: str, date: str) -> list[WorkoutEntry]:
        """Return the entries logged on a date (empty when none)."""

    def save_bucket(
        self, username: str, date: str, entries: list[WorkoutEntry]
    ) -> None:
        """Store a bucket; an empty list deletes the date."""

    def replace_workouts(
        self, username: str, workouts: dict[str, list[WorkoutEntry]]
    ) -> None:
        """Replace every bucket of a user."""


def calc_calories_burned(met: float, weight_kg: float, duration_min: float) -> int:
    """Estimate kcal burned: MET x kg x 3.5 / 200 per minute."""
    return round_half_up(met * weight_kg * 3.5 * duration_min / 200)


def custom_met(category: str, intensity: str) -> float:
    """MET for a custom workout; unknown combinations use the default."""
    return INTENSITY_METS.get(category, {}).get(intensity, DEFAULT_MET)


def find_template(name: str) -> WorkoutTemplate | None:
    for template in WORKOUT_LIBRARY:
        if template.name == name:
            return template
    return None


@dataclass
class WorkoutService:
    """Service that logs and removes workout entries."""

    workout_repository: WorkoutRepository
    profile_repository: ProfileRepository

    def list_workouts(self, username: str) -> dict[str, list[WorkoutEntry]]:
        return self.workout_repository.list_workouts(username)

    def log_workout(  # noqa: PLR0913
        self,
        username: str,
        date: str,
        workout_name: str,
        category: str,
        duration_min: float,
        met: float,
    ) -> WorkoutEntry:
        """Append a workout to the date's bucket with its burn fixed now."""
        if duration_min <= 0:
            raise ValueError(f"duration_min must be positive, got {duration_min}")
        if met <= 0:
            raise ValueError(f"met must be positive, got {met}")
        key = parse_log_date(date)
        entry = WorkoutEntry(
            id=uuid4().hex,
            date=key,
            workout_name=workout_name,
            category=category if category in CATEGORY_ORDER else OTHER,
            duration_min=duration_min,
            met=met,
            calories_burned=calc_calories_burned(
                met, self._weight_for(username), duration_min
            ),
        )
        bucket = self.workout_repository.get_bucket(username, key)
        self.workout_repository.save_bucket(username, key, [*bucket, entry])
        return entry

    def log_library_workout(
        self, username: str, date: str, name: str, duration_min: float
    ) -> WorkoutEntry:
        """Log an activity from the built-in library."""
        template = find_template(name)
        if template is None:
            raise ValueError(f"Unknown workout: {name!r}")
        return self.log_workout(
            username, date, template.name, template.category, duration_min, template.met
        )

    def log_custom_workout(  # noqa: PLR0913
        self,
        username: str,
        date: str,
        name: str,
        category: str,
        intensity: str,
        duration_min: float,
    ) -> WorkoutEntry:
        """Log a custom activity whose MET comes from category and intensity."""
        return self.log_workout(
            username,
            date,
            name.strip() or CUSTOM_WORKOUT_NAME,
            category,
            duration_min,
            custom_met(category, intensity),
        )

    def delete_workout(self, username: str, date: str, entry_id: str) -> bool:
        """Remove one entry; the bucket goes away when it becomes empty."""
        key = parse_log_date(date)
        bucket = self.workout_repository.get_bucket(username, key)
        remaining = [entry for entry in bucket if entry.id != entry_id]
        if len(remaining) == len(bucket):
            return False
        self.workout_repository.save_bucket(username, key, remaining)
        return True

    def _weight_for(self, username: str) -> float:
        profile = self.profile_repository.get_profile(username)
        if profile is None:
            raise LookupError(f"Unknown user: {username}")
        if not profile.weight_kg:
            _logger.info(
                "No weight on profile, using %s kg: user=%s",
                FALLBACK_WEIGHT_KG,
                username,
            )
            return FALLBACK_WEIGHT_KG
        return profile.weight_kg
