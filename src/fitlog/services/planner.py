"""Seeded, diet-filtered daily meal suggestions."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from fitlog.domain.energy import DEFAULT_ACTIVITY_MULTIPLIER
from fitlog.domain.food_library import ALL_TAGS, ALLOWED_TAGS, FOOD_LIBRARY, PlanFood
from fitlog.domain.logs import DailyLog
from fitlog.domain.meals import MEAL_KEYS
from fitlog.domain.profiles import DEFAULT_PREFERRED_DEFICIT, Profile
from fitlog.services.energy import EnergyService
from fitlog.services.macros import round_half_up
from fitlog.services.meals import DailyLogService

SLOT_SHARES = {
    "breakfast": 0.25,
    "lunch": 0.35,
    "dinner": 0.30,
    "snacks": 0.10,
}
SLOT_SEED_STRIDE = 137
TARGET_STEP = 50
PROTEIN_BONUS_WEIGHT = 250

WARNING_TOO_LOW = "too_low"
WARNING_TOO_HIGH = "too_high"

_logger = logging.getLogger(__name__)


def seeded_shuffle(items: Sequence[PlanFood], seed: int) -> list[PlanFood]:
    """Fisher-Yates shuffle driven by a 31-bit linear congruential generator."""
    result = list(items)
    state = seed
    for i in range(len(result) - 1, 0, -1):
        state = (state * 1664525 + 1013904223) & 0x7FFFFFFF
        j = state % (i + 1)
        result[i], result[j] = result[j], result[i]
    return result


def filter_by_diet(items: Sequence[PlanFood], diet_category: str) -> list[PlanFood]:
    """Keep the dishes a diet allows; unknown diets allow everything."""
    allowed = ALLOWED_TAGS.get(diet_category, ALL_TAGS)
    return [item for item in items if item.tag in allowed]


def pick_best_item(
    candidates: Sequence[PlanFood], budget: float, fat_loss_mode: bool
) -> PlanFood | None:
    """Closest dish to the budget, favouring protein density when cutting."""
    best: PlanFood | None = None
    best_score = float("inf")
    for item in candidates:
        score = abs(item.calories - budget)
        if fat_loss_mode:
            score -= item.protein_g / item.calories * PROTEIN_BONUS_WEIGHT
        if score < best_score:
            best, best_score = item, score
    return best


@dataclass(frozen=True)
class PlanSlot:
    budget: int
    items: list[PlanFood]


@dataclass(frozen=True)
class MealPlan:
    """One suggested day: a dish per slot plus day totals."""

    target_calories: int
    fat_loss_mode: bool
    seed: int
    slots: dict[str, PlanSlot]

    @property
    def total_calories(self) -> float:
        return sum(
            item.calories for slot in self.slots.values() for item in slot.items
        )

    @property
    def total_protein_g(self) -> float:
        return sum(
            item.protein_g for slot in self.slots.values() for item in slot.items
        )


def build_plan(
    target_calories: int, fat_loss_mode: bool, seed: int, diet_category: str
) -> MealPlan:
    """Build a plan; identical inputs always give the identical plan."""
    slots: dict[str, PlanSlot] = {}
    for index, key in enumerate(MEAL_KEYS):
        budget = round_half_up(target_calories * SLOT_SHARES[key])
        catalog = FOOD_LIBRARY[key]
        source = filter_by_diet(catalog, diet_category) or list(catalog)
        shuffled = seeded_shuffle(source, seed + index * SLOT_SEED_STRIDE)
        best = pick_best_item(shuffled, budget, fat_loss_mode)
        slots[key] = PlanSlot(budget=budget, items=[best] if best else [])
    return MealPlan(
        target_calories=target_calories,
        fat_loss_mode=fat_loss_mode,
        seed=seed,
        slots=slots,
    )


def is_fat_loss_mode(profile: Profile) -> bool:
    return (
        profile.goal_weight_kg is not None
        and profile.weight_kg is not None
        and profile.goal_weight_kg < profile.weight_kg
    )


@dataclass(frozen=True)
class PlanTarget:
    """Calorie target for suggestions, with sanity warnings."""

    target_calories: int | None
    fat_loss_mode: bool
    deficit: int
    warnings: list[str]


def plan_target(
    bmr: float | None,
    tdee: int | None,
    avg_burn: float,
    fat_loss_mode: bool,
    deficit: int,
) -> PlanTarget:
    """Target = TDEE + average burn, minus the deficit when cutting.

    Rounded to the nearest 50 kcal. No TDEE means no target.
    """
    warnings: list[str] = []
    if tdee is None:
        return PlanTarget(None, fat_loss_mode, deficit, warnings)
    raw = tdee + avg_burn
    if fat_loss_mode:
        raw -= deficit
    target = round_half_up(raw / TARGET_STEP) * TARGET_STEP
    if bmr is not None and target < bmr + 100:
        warnings.append(WARNING_TOO_LOW)
    if target > tdee + 300:
        warnings.append(WARNING_TOO_HIGH)
    return PlanTarget(target, fat_loss_mode, deficit, warnings)


@dataclass
class MealPlanService:
    """Service producing meal suggestions from a user's energy picture."""

    energy_service: EnergyService
    log_service: DailyLogService

    def target(
        self,
        username: str,
        deficit: int | None = None,
        activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
        today: date | None = None,
    ) -> PlanTarget:
        profile = self.energy_service.profile_repository.get_profile(username)
        if profile is None:
            raise LookupError(f"Unknown user: {username}")
        if deficit is not None and deficit < 0:
            raise ValueError(f"deficit must not be negative, got {deficit}")
        summary = self.energy_service.summarize(username, activity_multiplier, today)
        return plan_target(
            summary.bmr,
            summary.tdee,
            summary.avg_burn,
            is_fat_loss_mode(profile),
            deficit or profile.preferred_deficit or DEFAULT_PREFERRED_DEFICIT,
        )

    def suggest(  # noqa: PLR0913
        self,
        username: str,
        seed: int = 0,
        deficit: int | None = None,
        activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
        today: date | None = None,
    ) -> tuple[PlanTarget, MealPlan | None]:
        """Return the target and its plan; the plan is None without a target."""
        target = self.target(username, deficit, activity_multiplier, today)
        if target.target_calories is None:
            return target, None
        profile = self.energy_service.profile_repository.get_profile(username)
        plan = build_plan(
            target.target_calories, target.fat_loss_mode, seed, profile.diet_category
        )
        return target, plan

    def copy_plan_to_log(  # noqa: PLR0913
        self,
        username: str,
        seed: int = 0,
        deficit: int | None = None,
        activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
        today: date | None = None,
    ) -> DailyLog:
        """Save the plan totals as tomorrow's log, replacing any log there."""
        today = today or date.today()
        _, plan = self.suggest(username, seed, deficit, activity_multiplier, today)
        if plan is None:
            raise ValueError("Cannot build a plan without a TDEE estimate")
        log = DailyLog(
            date=(today + timedelta(days=1)).isoformat(),
            calories=plan.total_calories,
            protein_g=plan.total_protein_g,
        )
        _logger.info("Copying meal plan to log: user=%s date=%s", username, log.date)
        return self.log_service.save_log(username, log)
