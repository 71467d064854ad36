"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date

from fastapi import Body, FastAPI, Request, status
from fastapi.responses import JSONResponse

from fitlog.api.models import (
    CopyPlanRequest,
    GoalsUpdate,
    LogSaveRequest,
    MealItemRequest,
    ProfileCreate,
    ProfileUpdate,
    WorkoutRequest,
)
from fitlog.app_logging import configure_logging
from fitlog.config import parse_activity_multiplier
from fitlog.containers import AppContainer
from fitlog.domain.meals import MODE_MANUAL
from fitlog.domain.profiles import Profile
from fitlog.services.analytics import STREAK_LOGS
from fitlog.services.codec import food_item_to_dict, profile_to_dict, workout_to_dict
from fitlog.services.energy import STATUS_MESSAGES
from fitlog.services.meals import (
    assemble_log,
    build_manual_item,
    build_selected_item,
    daily_log_to_dict,
)
from fitlog.services.planner import MealPlan


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(LookupError)
    async def not_found(request: Request, exc: LookupError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(ValueError)
    async def invalid_input(request: Request, exc: ValueError) -> JSONResponse:
        logger.info("Rejected request %s: %s", request.url.path, exc)
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/users/{username}/profile")
    async def get_profile(username: str, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return _profile_payload(state_container.profile_service.get_profile(username))

    @app.post("/users/{username}/profile")
    async def create_profile(
        username: str, body: ProfileCreate, request: Request
    ) -> dict[str, object]:
        """Create the profile on first sign-in, or return the existing one."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.create_profile(
            username, **body.model_dump()
        )
        return _profile_payload(profile)

    @app.patch("/users/{username}/profile")
    async def update_profile(
        username: str, body: ProfileUpdate, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.update_profile(
            username, body.model_dump(exclude_unset=True)
        )
        return _profile_payload(profile)

    @app.patch("/users/{username}/goals")
    async def update_goals(
        username: str, body: GoalsUpdate, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.update_goals(
            username, body.weekly_active_minutes_goal, body.preferred_deficit
        )
        return _profile_payload(profile)

    @app.get("/users/{username}/logs")
    async def list_logs(username: str, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        logs = state_container.log_service.list_logs(username)
        return {"logs": [daily_log_to_dict(log) for log in logs]}

    @app.get("/users/{username}/logs/{log_date}")
    async def get_log(
        username: str, log_date: str, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        log = state_container.log_service.get_log(username, log_date)
        if log is None:
            raise LookupError(f"No log for {log_date}")
        return daily_log_to_dict(log)

    @app.put("/users/{username}/logs/{log_date}")
    async def save_log(
        username: str, log_date: str, body: LogSaveRequest, request: Request
    ) -> dict[str, object]:
        """Create or overwrite the log for a date."""
        state_container: AppContainer = request.app.state.container
        state_container.profile_service.get_profile(username)
        log = assemble_log(
            log_date,
            body.meals,
            auto_fill=body.auto_fill,
            macros=body.model_dump(
                include={"calories", "protein_g", "carbs_g", "fat_g", "fiber_g"}
            ),
            morning_weight_kg=body.morning_weight_kg,
            steps=body.steps,
            notes=body.notes,
        )
        state_container.log_service.save_log(username, log)
        return daily_log_to_dict(log)

    @app.delete("/users/{username}/logs/{log_date}")
    async def delete_log(
        username: str, log_date: str, request: Request
    ) -> dict[str, bool]:
        state_container: AppContainer = request.app.state.container
        return {"deleted": state_container.log_service.delete_log(username, log_date)}

    @app.post("/users/{username}/meal-items")
    async def build_meal_item(
        username: str, body: MealItemRequest, request: Request
    ) -> dict[str, object]:
        """Resolve a food item's macros without saving it."""
        state_container: AppContainer = request.app.state.container
        state_container.profile_service.get_profile(username)
        if body.mode == MODE_MANUAL:
            if body.values is None:
                raise ValueError("Manual items need macro values")
            item = build_manual_item(
                body.name, body.grams, body.basis, body.values.to_domain(), body.id
            )
        else:
            if body.candidate is None:
                raise ValueError("Search items need a selected candidate")
            item = build_selected_item(
                body.mode, body.candidate.to_domain(), body.grams, body.id
            )
        return food_item_to_dict(item)

    @app.get("/users/{username}/workouts")
    async def list_workouts(username: str, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        workouts = state_container.workout_service.list_workouts(username)
        return {
            "workouts": {
                day: [workout_to_dict(entry) for entry in entries]
                for day, entries in sorted(workouts.items())
            }
        }

    @app.post("/users/{username}/workouts")
    async def log_workout(
        username: str, body: WorkoutRequest, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        service = state_container.workout_service
        if body.intensity is not None:
            entry = service.log_custom_workout(
                username,
                body.date,
                body.name,
                body.category,
                body.intensity,
                body.duration_min,
            )
        elif body.met is not None:
            entry = service.log_workout(
                username,
                body.date,
                body.name,
                body.category,
                body.duration_min,
                body.met,
            )
        else:
            entry = service.log_library_workout(
                username, body.date, body.name, body.duration_min
            )
        return workout_to_dict(entry)

    @app.delete("/users/{username}/workouts/{workout_date}/{entry_id}")
    async def delete_workout(
        username: str, workout_date: str, entry_id: str, request: Request
    ) -> dict[str, bool]:
        state_container: AppContainer = request.app.state.container
        deleted = state_container.workout_service.delete_workout(
            username, workout_date, entry_id
        )
        return {"deleted": deleted}

    @app.get("/users/{username}/energy")
    async def energy(
        username: str,
        request: Request,
        activity: str | None = None,
        today: date | None = None,
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        summary = state_container.energy_service.summarize(
            username, parse_activity_multiplier(activity), today
        )
        payload = asdict(summary)
        payload["status_message"] = STATUS_MESSAGES.get(summary.status)
        return payload

    @app.get("/users/{username}/plan")
    async def meal_plan(  # noqa: PLR0913
        username: str,
        request: Request,
        seed: int = 0,
        deficit: int | None = None,
        activity: str | None = None,
        today: date | None = None,
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        target, plan = state_container.plan_service.suggest(
            username, seed, deficit, parse_activity_multiplier(activity), today
        )
        return {"target": asdict(target), "plan": _plan_payload(plan)}

    @app.post("/users/{username}/plan/copy-to-log")
    async def copy_plan_to_log(
        username: str,
        body: CopyPlanRequest,
        request: Request,
        today: date | None = None,
    ) -> dict[str, object]:
        """Save the plan totals as tomorrow's log."""
        state_container: AppContainer = request.app.state.container
        log = state_container.plan_service.copy_plan_to_log(
            username,
            body.seed,
            body.deficit,
            parse_activity_multiplier(body.activity),
            today,
        )
        return daily_log_to_dict(log)

    @app.get("/users/{username}/analytics")
    async def analytics(
        username: str,
        request: Request,
        activity: str | None = None,
        today: date | None = None,
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        service = state_container.analytics_service
        overview = service.workout_overview(username, today)
        progress = service.progress_overview(
            username, parse_activity_multiplier(activity), today
        )
        log_streak = service.log_streak(username, today)
        return {
            "log_streak": log_streak,
            "best_log_streak": service.refresh_best_streak(
                username, STREAK_LOGS, log_streak
            ),
            "workouts": asdict(overview),
            "progress": asdict(progress),
        }

    @app.get("/search/{mode}")
    async def search(mode: str, request: Request, q: str = "") -> dict[str, object]:
        """Cached food search; short queries return nothing."""
        state_container: AppContainer = request.app.state.container
        state_container.search_service.provider_for(mode)
        if len(q.strip()) < state_container.settings.search_min_chars:
            return {"results": [], "error": None}
        outcome = await state_container.search_service.search(mode, q)
        return {
            "results": [asdict(candidate) for candidate in outcome.results],
            "error": outcome.error,
        }

    @app.get("/users/{username}/export")
    async def export_snapshot(username: str, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return state_container.snapshot_service.export_snapshot(username)

    @app.post("/users/{username}/import")
    async def import_snapshot(
        username: str, request: Request, payload: dict[str, object] = Body(...)
    ) -> dict[str, object]:
        """Replace the user's data with an exported snapshot."""
        state_container: AppContainer = request.app.state.container
        result = state_container.snapshot_service.import_snapshot(username, payload)
        return asdict(result)

    return app


def _profile_payload(profile: Profile) -> dict[str, object]:
    return {"username": profile.username, **profile_to_dict(profile)}


def _plan_payload(plan: MealPlan | None) -> dict[str, object] | None:
    if plan is None:
        return None
    return {
        "target_calories": plan.target_calories,
        "fat_loss_mode": plan.fat_loss_mode,
        "seed": plan.seed,
        "slots": {
            key: {"budget": slot.budget, "items": [asdict(i) for i in slot.items]}
            for key, slot in plan.slots.items()
        },
        "total_calories": plan.total_calories,
        "total_protein_g": plan.total_protein_g,
    }
