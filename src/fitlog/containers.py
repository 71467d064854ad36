"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from fitlog.adapters.fdc_client import HttpxFdcClient
from fitlog.adapters.off_client import HttpxOffClient
from fitlog.adapters.supabase_log_repository import SupabaseLogRepository
from fitlog.adapters.supabase_profile_repository import SupabaseProfileRepository
from fitlog.adapters.supabase_streak_repository import SupabaseStreakRepository
from fitlog.adapters.supabase_workout_repository import SupabaseWorkoutRepository
from fitlog.config import Settings
from fitlog.domain.meals import MODE_GENERIC, MODE_OFF
from fitlog.services.analytics import AnalyticsService
from fitlog.services.autocomplete import AutocompleteSession
from fitlog.services.cache import LruCache
from fitlog.services.energy import EnergyService
from fitlog.services.food_search import (
    FdcFoodProvider,
    FoodSearchService,
    OpenFoodFactsProvider,
)
from fitlog.services.meals import DailyLogService
from fitlog.services.planner import MealPlanService
from fitlog.services.profiles import ProfileService
from fitlog.services.snapshots import SnapshotService
from fitlog.services.workouts import WorkoutService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    log_service: DailyLogService
    workout_service: WorkoutService
    energy_service: EnergyService
    plan_service: MealPlanService
    analytics_service: AnalyticsService
    search_service: FoodSearchService
    snapshot_service: SnapshotService
    close_resources: Callable[[], Awaitable[None]]

    def autocomplete_session(self, mode: str) -> AutocompleteSession:
        """Create a typeahead session tuned by the search settings."""
        return AutocompleteSession(
            search_service=self.search_service,
            mode=mode,
            min_chars=self.settings.search_min_chars,
            debounce_seconds=self.settings.search_debounce_ms / 1000,
        )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    log_repository = SupabaseLogRepository(supabase_client)
    workout_repository = SupabaseWorkoutRepository(supabase_client)
    streak_repository = SupabaseStreakRepository(supabase_client)

    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout_seconds=resolved_settings.http_timeout_seconds,
    )
    off_client = HttpxOffClient.create(
        base_url=resolved_settings.off_base_url,
        timeout_seconds=resolved_settings.http_timeout_seconds,
    )
    page_size = resolved_settings.search_result_limit
    search_service = FoodSearchService(
        providers={
            MODE_GENERIC: FdcFoodProvider(fdc_client, page_size=page_size),
            MODE_OFF: OpenFoodFactsProvider(off_client, page_size=page_size),
        },
        cache=LruCache(capacity=resolved_settings.search_cache_capacity),
        result_limit=resolved_settings.search_result_limit,
    )

    log_service = DailyLogService(log_repository)
    energy_service = EnergyService(
        profile_repository=profile_repository,
        log_repository=log_repository,
        workout_repository=workout_repository,
    )

    async def close_resources() -> None:
        await fdc_client.close()
        await off_client.close()

    return AppContainer(
        settings=resolved_settings,
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
