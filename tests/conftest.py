"""Shared test fixtures."""

import asyncio
import logging
from dataclasses import dataclass, field, replace

import pytest

from fitlog.app_logging import LOGGER_NAME
from fitlog.config import Settings
from fitlog.containers import AppContainer
from fitlog.domain.logs import DailyLog
from fitlog.domain.meals import MODE_GENERIC, MODE_OFF
from fitlog.domain.nutrition import MacroQuantity, SearchCandidate
from fitlog.domain.profiles import Profile
from fitlog.domain.workouts import WorkoutEntry
from fitlog.services.analytics import AnalyticsService, StreakRepository
from fitlog.services.cache import LruCache
from fitlog.services.energy import EnergyService
from fitlog.services.food_search import FoodSearchProvider, FoodSearchService
from fitlog.services.meals import DailyLogService, LogRepository
from fitlog.services.planner import MealPlanService
from fitlog.services.profiles import ProfileRepository, ProfileService
from fitlog.services.snapshots import SnapshotService
from fitlog.services.workouts import WorkoutRepository, WorkoutService


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[str, Profile] = field(default_factory=dict)

    def get_profile(self, username: str) -> Profile | None:
        return self.profiles.get(username)

    def create_profile(self, profile: Profile) -> Profile:
        self.profiles[profile.username] = profile
        return profile

    def save_profile(self, profile: Profile) -> None:
        self.profiles[profile.username] = profile


@dataclass
class InMemoryLogRepository(LogRepository):
    """In-memory daily log repository for tests."""

    logs: dict[str, dict[str, DailyLog]] = field(default_factory=dict)
    writes: int = 0

    def list_logs(self, username: str) -> list[DailyLog]:
        user_logs = self.logs.get(username, {})
        return [user_logs[key] for key in sorted(user_logs)]

    def get_log(self, username: str, date: str) -> DailyLog | None:
        return self.logs.get(username, {}).get(date)

    def save_log(self, username: str, log: DailyLog) -> None:
        self.writes += 1
        self.logs.setdefault(username, {})[log.date] = log

    def delete_log(self, username: str, date: str) -> None:
        self.writes += 1
        self.logs.get(username, {}).pop(date, None)

    def replace_logs(self, username: str, logs: list[DailyLog]) -> None:
        self.writes += 1
        self.logs[username] = {log.date: log for log in logs}


@dataclass
class InMemoryWorkoutRepository(WorkoutRepository):
    """In-memory workout repository for tests."""

    buckets: dict[str, dict[str, list[WorkoutEntry]]] = field(default_factory=dict)
    writes: int = 0

    def list_workouts(self, username: str) -> dict[str, list[WorkoutEntry]]:
        return {
            day: list(entries)
            for day, entries in self.buckets.get(username, {}).items()
            if entries
        }

    def get_bucket(self, username: str, date: str) -> list[WorkoutEntry]:
        return list(self.buckets.get(username, {}).get(date, []))

    def save_bucket(
        self, username: str, date: str, entries: list[WorkoutEntry]
    ) -> None:
        self.writes += 1
        user_buckets = self.buckets.setdefault(username, {})
        if entries:
            user_buckets[date] = list(entries)
        else:
            user_buckets.pop(date, None)

    def replace_workouts(
        self, username: str, workouts: dict[str, list[WorkoutEntry]]
    ) -> None:
        self.writes += 1
        self.buckets[username] = {
            day: list(entries) for day, entries in workouts.items() if entries
        }


@dataclass
class InMemoryStreakRepository(StreakRepository):
    """In-memory best streak repository for tests."""

    values: dict[tuple[str, str], int] = field(default_factory=dict)

    def get_best_streak(self, username: str, kind: str) -> int:
        return self.values.get((username, kind), 0)

    def set_best_streak(self, username: str, kind: str, value: int) -> None:
        self.values[(username, kind)] = value


def make_candidate(
    name: str, calories: float = 100.0, protein_g: float = 5.0
) -> SearchCandidate:
    return SearchCandidate(
        external_id=f"id-{name}",
        name=name,
        brand=None,
        per100g=MacroQuantity(
            calories=calories, protein_g=protein_g, carbs_g=10.0, fat_g=2.0, fiber_g=1.0
        ),
    )


@dataclass
class FakeFoodProvider(FoodSearchProvider):
    """Fake provider recording queries, with optional per-query delays."""

    results: dict[str, list[SearchCandidate]] = field(default_factory=dict)
    delays: dict[str, float] = field(default_factory=dict)
    error: Exception | None = None
    queries: list[str] = field(default_factory=list)

    async def search(self, query: str) -> list[SearchCandidate]:
        self.queries.append(query)
        delay = self.delays.get(query)
        if delay:
            await asyncio.sleep(delay)
        if self.error is not None:
            raise self.error
        if query in self.results:
            return list(self.results[query])
        return [make_candidate(f"{query} {index}") for index in range(3)]


def make_entry(  # noqa: PLR0913
    date: str,
    duration_min: float = 30,
    calories_burned: int = 200,
    category: str = "Cardio",
    met: float = 6.0,
    entry_id: str | None = None,
) -> WorkoutEntry:
    return WorkoutEntry(
        id=entry_id or f"w-{date}-{duration_min}-{calories_burned}",
        date=date,
        workout_name="Jogging",
        category=category,
        duration_min=duration_min,
        met=met,
        calories_burned=calories_burned,
    )


ALICE = Profile(
    username="alice",
    name="Alice",
    age=30,
    gender="male",
    height_cm=175,
    weight_kg=70,
    diet_category="Vegan",
    goal_weight_kg=65,
)


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Undo configure_logging so caplog sees records from every test."""
    logger = logging.getLogger(LOGGER_NAME)
    yield
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository(profiles={"alice": replace(ALICE)})


@pytest.fixture
def log_repository() -> InMemoryLogRepository:
    return InMemoryLogRepository()


@pytest.fixture
def workout_repository() -> InMemoryWorkoutRepository:
    return InMemoryWorkoutRepository()


@pytest.fixture
def streak_repository() -> InMemoryStreakRepository:
    return InMemoryStreakRepository()


@pytest.fixture
def food_provider() -> FakeFoodProvider:
    return FakeFoodProvider()


@pytest.fixture
def search_service(food_provider: FakeFoodProvider) -> FoodSearchService:
    return FoodSearchService(
        providers={MODE_GENERIC: food_provider, MODE_OFF: food_provider},
        cache=LruCache(capacity=50),
    )


@pytest.fixture
def energy_service(
    profile_repository: InMemoryProfileRepository,
    log_repository: InMemoryLogRepository,
    workout_repository: InMemoryWorkoutRepository,
) -> EnergyService:
    return EnergyService(
        profile_repository=profile_repository,
        log_repository=log_repository,
        workout_repository=workout_repository,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    profile_repository: InMemoryProfileRepository,
    log_repository: InMemoryLogRepository,
    workout_repository: InMemoryWorkoutRepository,
    streak_repository: InMemoryStreakRepository,
    search_service: FoodSearchService,
    energy_service: EnergyService,
) -> AppContainer:
    log_service = DailyLogService(log_repository)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        profile_service=ProfileService(profile_repository),
        log_service=log_service,
        workout_service=WorkoutService(
            workout_repository=workout_repository,
            profile_repository=profile_repository,
        ),
        energy_service=energy_service,
        plan_service=MealPlanService(
            energy_service=energy_service, log_service=log_service
        ),
        analytics_service=AnalyticsService(
            profile_repository=profile_repository,
            log_repository=log_repository,
            workout_repository=workout_repository,
            streak_repository=streak_repository,
        ),
        search_service=search_service,
        snapshot_service=SnapshotService(
            profile_repository=profile_repository,
            log_repository=log_repository,
            workout_repository=workout_repository,
        ),
        close_resources=close_resources,
    )
