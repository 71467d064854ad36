"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field

import pytest

from fitlog.adapters.supabase_log_repository import SupabaseLogRepository
from fitlog.adapters.supabase_profile_repository import SupabaseProfileRepository
from fitlog.adapters.supabase_streak_repository import SupabaseStreakRepository
from fitlog.adapters.supabase_workout_repository import SupabaseWorkoutRepository
from fitlog.domain.logs import DailyLog
from tests.conftest import ALICE, make_entry


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "update": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_on_conflict: str | None = None
    actions: list[str] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def upsert(self, payload, on_conflict: str = "") -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        self.actions.append(action)
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_supabase_profile_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    profiles_table = client.table("profiles")
    row = {
        "username": "alice",
        "profile": {
            "name": "Alice",
            "age": 30,
            "gender": "male",
            "heightCm": 175,
            "weightKg": 70,
            "dietCategory": "Vegan",
            "goalWeightKg": 65,
        },
    }
    profiles_table.queue("insert", [row])
    profiles_table.queue("select", [row])

    repository = SupabaseProfileRepository(client)
    created = repository.create_profile(ALICE)
    fetched = repository.get_profile("alice")

    assert created == ALICE
    assert fetched == ALICE
    assert profiles_table.last_filters[-1] == ("username", "alice")
    assert repository.get_profile("nobody") is None


def test_supabase_profile_repository_create_failure() -> None:
    repository = SupabaseProfileRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError):
        repository.create_profile(ALICE)


def test_supabase_profile_repository_save() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseProfileRepository(client)

    repository.save_profile(ALICE)

    table = client.table("profiles")
    assert table.last_payload["profile"]["weightKg"] == 70
    assert table.last_filters == [("username", "alice")]


def test_supabase_log_repository() -> None:
    client = FakeSupabaseClient()
    logs_table = client.table("daily_logs")
    logs_table.queue(
        "select",
        [
            {
                "date": "2024-01-01",
                "log": {"calories": 1800, "meals": {"lunch": {"items": ["dal"]}}},
            },
            {"date": "2024-01-02", "log": {"calories": 2000}},
        ],
    )

    repository = SupabaseLogRepository(client)
    logs = repository.list_logs("alice")
    repository.save_log("alice", DailyLog(date="2024-01-03", calories=2100))

    assert [log.date for log in logs] == ["2024-01-01", "2024-01-02"]
    assert logs[0].meals["lunch"].items[0].name == "dal"
    assert logs_table.last_on_conflict == "username,date"
    assert logs_table.last_payload["date"] == "2024-01-03"
    assert logs_table.last_payload["log"]["calories"] == 2100
    assert repository.get_log("alice", "2024-01-09") is None


def test_supabase_log_repository_replace() -> None:
    client = FakeSupabaseClient()
    logs_table = client.table("daily_logs")
    repository = SupabaseLogRepository(client)

    repository.replace_logs("alice", [DailyLog(date="2024-01-01")])
    repository.replace_logs("alice", [])

    assert logs_table.actions == ["delete", "insert", "delete"]


def test_supabase_workout_repository() -> None:
    client = FakeSupabaseClient()
    workouts_table = client.table("workouts")
    workouts_table.queue(
        "select",
        [
            {
                "date": "2024-01-05",
                "entries": [
                    {
                        "id": "w1",
                        "workoutName": "Jogging",
                        "category": "Cardio",
                        "durationMin": 30,
                        "met": 7,
                        "caloriesBurned": 257,
                    }
                ],
            },
            {"date": "2024-01-06", "entries": []},
        ],
    )

    repository = SupabaseWorkoutRepository(client)
    buckets = repository.list_workouts("alice")
    repository.save_bucket("alice", "2024-01-07", [make_entry("2024-01-07")])
    upserted = workouts_table.last_payload
    repository.save_bucket("alice", "2024-01-07", [])

    assert list(buckets) == ["2024-01-05"]
    assert buckets["2024-01-05"][0].date == "2024-01-05"
    assert buckets["2024-01-05"][0].calories_burned == 257
    assert upserted["entries"][0]["caloriesBurned"] == 200
    assert workouts_table.actions[-2:] == ["upsert", "delete"]


def test_supabase_streak_repository() -> None:
    client = FakeSupabaseClient()
    streaks_table = client.table("best_streaks")
    streaks_table.queue("select", [{"value": 6}])

    repository = SupabaseStreakRepository(client)

    assert repository.get_best_streak("alice", "logs") == 6
    assert repository.get_best_streak("alice", "workouts") == 0
    repository.set_best_streak("alice", "logs", 7)
    assert streaks_table.last_payload == {
        "username": "alice",
        "kind": "logs",
        "value": 7,
    }
    assert streaks_table.last_on_conflict == "username,kind"
