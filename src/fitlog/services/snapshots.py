"""JSON export and all-or-nothing import of a user's data."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fitlog.domain.logs import DailyLog
from fitlog.domain.profiles import Profile
from fitlog.domain.workouts import WorkoutEntry
from fitlog.services.codec import (
    profile_from_dict,
    profile_to_dict,
    workout_from_dict,
    workout_to_dict,
)
from fitlog.services.meals import (
    LogRepository,
    daily_log_from_dict,
    daily_log_to_dict,
    parse_log_date,
)
from fitlog.services.profiles import ProfileRepository
from fitlog.services.workouts import WorkoutRepository

SNAPSHOT_VERSION = 1

_logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot cannot be imported; nothing has been written."""


class SnapshotUser(BaseModel):
    """User block of a snapshot."""

    username: str = ""
    profile: dict[str, object] = Field(default_factory=dict)


class Snapshot(BaseModel):
    """Top-level snapshot shape. Records are decoded separately."""

    model_config = ConfigDict(populate_by_name=True)

    version: int = SNAPSHOT_VERSION
    exported_at: str | None = Field(default=None, alias="exportedAt")
    user: SnapshotUser
    logs: list[object]
    workouts: dict[str, list[object]]


@dataclass(frozen=True)
class ImportResult:
    username: str
    logs: int
    workout_days: int


@dataclass(frozen=True)
class _DecodedSnapshot:
    profile: Profile
    logs: list[DailyLog]
    workouts: dict[str, list[WorkoutEntry]]


def decode_snapshot(username: str, payload: object) -> _DecodedSnapshot:
    """Validate and decode every record of a snapshot without writing."""
    try:
        snapshot = Snapshot.model_validate(payload)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid snapshot: {exc.error_count()} error(s)") from exc
    try:
        logs_by_date = {}
        for raw in snapshot.logs:
            log = daily_log_from_dict(raw)
            logs_by_date[log.date] = log
        workouts: dict[str, list[WorkoutEntry]] = {}
        for day, entries in snapshot.workouts.items():
            if not entries:
                continue
            key = parse_log_date(day)
            workouts.setdefault(key, []).extend(
                workout_from_dict(raw, key) for raw in entries
            )
    except ValueError as exc:
        raise SnapshotError(f"Invalid snapshot record: {exc}") from exc
    return _DecodedSnapshot(
        profile=profile_from_dict(username, snapshot.user.profile),
        logs=sorted(logs_by_date.values(), key=lambda log: log.date),
        workouts=workouts,
    )


@dataclass
class SnapshotService:
    """Service for exporting and importing a user's complete data set."""

    profile_repository: ProfileRepository
    log_repository: LogRepository
    workout_repository: WorkoutRepository

    def export_snapshot(
        self, username: str, now: datetime | None = None
    ) -> dict[str, object]:
        """Return the user's profile, logs and workouts as a JSON-ready dict."""
        profile = self.profile_repository.get_profile(username)
        if profile is None:
            raise LookupError(f"Unknown user: {username}")
        logs = sorted(self.log_repository.list_logs(username), key=lambda log: log.date)
        workouts = self.workout_repository.list_workouts(username)
        return {
            "version": SNAPSHOT_VERSION,
            "exportedAt": (now or datetime.now(tz=UTC)).isoformat(),
            "user": {"username": username, "profile": profile_to_dict(profile)},
            "logs": [daily_log_to_dict(log) for log in logs],
            "workouts": {
                day: [workout_to_dict(entry) for entry in entries]
                for day, entries in sorted(workouts.items())
            },
        }

    def import_snapshot(self, username: str, payload: object) -> ImportResult:
        """Overwrite the user's data with a snapshot.

        Every record is decoded before the first write, so a bad snapshot
        leaves the stored data untouched.
        """
        decoded = decode_snapshot(username, payload)
        if self.profile_repository.get_profile(username) is None:
            self.profile_repository.create_profile(decoded.profile)
        else:
            self.profile_repository.save_profile(decoded.profile)
        self.log_repository.replace_logs(username, decoded.logs)
        self.workout_repository.replace_workouts(username, decoded.workouts)
        _logger.info(
            "Imported snapshot: user=%s logs=%s workout_days=%s",
            username,
            len(decoded.logs),
            len(decoded.workouts),
        )
        return ImportResult(
            username=username,
            logs=len(decoded.logs),
            workout_days=len(decoded.workouts),
        )
