"""Energy balance estimates: BMR, TDEE, workout burn and deficits.

Every estimate is advisory. When an input is missing the estimate is None,
never a fabricated zero, and callers are expected to show it as unavailable.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, timedelta

from fitlog.domain.energy import ACTIVITY_MULTIPLIERS, DEFAULT_ACTIVITY_MULTIPLIER
from fitlog.domain.logs import DailyLog
from fitlog.domain.profiles import Profile
from fitlog.domain.workouts import WorkoutEntry
from fitlog.services.macros import round_half_up
from fitlog.services.meals import LogRepository
from fitlog.services.profiles import ProfileRepository
from fitlog.services.workouts import WorkoutRepository

KCAL_PER_KG_FAT = 7700
BURN_WINDOW_DAYS = 7
INTAKE_WINDOW_LOGS = 7

STATUS_SAFE_CUT = "safe_cut"
STATUS_MODERATE = "moderate"
STATUS_AGGRESSIVE = "aggressive"
STATUS_SURPLUS = "surplus"
STATUS_MAINTENANCE = "maintenance"

STATUS_MESSAGES = {
    STATUS_SAFE_CUT: "Safe fat loss zone",
    STATUS_MODERATE: "Moderate cut - monitor energy levels",
    STATUS_AGGRESSIVE: "Aggressive cut - risk of muscle loss",
    STATUS_SURPLUS: "Caloric surplus - bulking phase",
    STATUS_MAINTENANCE: "Near maintenance - body recomposition range",
}


def bmr_gender(gender: str | None) -> str | None:
    """Return the gender the BMR formula can use, if any."""
    cleaned = (gender or "").strip().lower()
    return cleaned if cleaned in {"female", "male"} else None


def calc_bmr(
    weight_kg: float | None,
    height_cm: float | None,
    age: float | None,
    gender: str | None,
) -> float | None:
    """Mifflin-St Jeor basal metabolic rate in kcal/day."""
    formula_gender = bmr_gender(gender)
    if formula_gender is None:
        return None
    if not weight_kg or not height_cm or not age:
        return None
    if weight_kg <= 0 or height_cm <= 0 or age <= 0:
        return None
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base - 161 if formula_gender == "female" else base + 5


def calc_tdee(
    bmr: float | None, activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER
) -> int | None:
    """Total daily energy expenditure for an activity multiplier."""
    if activity_multiplier not in ACTIVITY_MULTIPLIERS:
        raise ValueError(f"Unknown activity multiplier: {activity_multiplier}")
    if bmr is None:
        return None
    return round_half_up(bmr * activity_multiplier)


def weekly_avg_intake(logs: Iterable[DailyLog]) -> float | None:
    """Mean calories over the 7 most recent logs that tracked calories."""
    tracked = sorted(
        (log for log in logs if log.calories is not None),
        key=lambda log: log.date,
        reverse=True,
    )[:INTAKE_WINDOW_LOGS]
    if not tracked:
        return None
    return sum(log.calories for log in tracked) / len(tracked)


def daily_burn(workouts: Mapping[str, list[WorkoutEntry]], day: str) -> int:
    """Calories burned by the workouts logged on `day`."""
    return sum(entry.calories_burned for entry in workouts.get(day, []))


def avg_burn(workouts: Mapping[str, list[WorkoutEntry]], today: date) -> float:
    """Average daily burn over today and the six days before.

    Days without workouts count, so the denominator is always seven.
    """
    total = 0
    for offset in range(BURN_WINDOW_DAYS):
        total += daily_burn(workouts, (today - timedelta(days=offset)).isoformat())
    return total / BURN_WINDOW_DAYS


def diet_deficit(tdee: float | None, avg_intake: float | None) -> float | None:
    """Deficit from diet alone; positive is a deficit, negative a surplus."""
    if tdee is None or avg_intake is None:
        return None
    return tdee - avg_intake


def net_deficit(
    tdee: float | None, burn: float, avg_intake: float | None
) -> float | None:
    """Deficit including workout burn."""
    if tdee is None or avg_intake is None:
        return None
    return (tdee + burn) - avg_intake


def weekly_fat_change_kg(deficit: float | None) -> float | None:
    """Projected weekly fat change in kg; positive means loss."""
    if deficit is None:
        return None
    return deficit * 7 / KCAL_PER_KG_FAT


def classify_deficit(deficit: float | None) -> str | None:
    if deficit is None:
        return None
    if 200 <= deficit <= 500:
        return STATUS_SAFE_CUT
    if 500 < deficit <= 700:
        return STATUS_MODERATE
    if deficit > 700:
        return STATUS_AGGRESSIVE
    if deficit < -50:
        return STATUS_SURPLUS
    return STATUS_MAINTENANCE


@dataclass(frozen=True)
class BodyTargets:
    """Protein and water targets derived from body weight."""

    protein_maintenance_g: int
    protein_cut_low_g: int
    protein_cut_high_g: int
    water_l: float


def body_targets(weight_kg: float | None) -> BodyTargets | None:
    if not weight_kg:
        return None
    return BodyTargets(
        protein_maintenance_g=round_half_up(weight_kg * 1.2),
        protein_cut_low_g=round_half_up(weight_kg * 1.6),
        protein_cut_high_g=round_half_up(weight_kg * 2.0),
        water_l=round_half_up(weight_kg * 35 / 1000 * 10) / 10,
    )


@dataclass(frozen=True)
class EnergySummary:
    """Energy balance picture for one user on one day."""

    bmr: float | None
    tdee: int | None
    activity_multiplier: float
    avg_intake: float | None
    avg_burn: float
    today_burn: int
    effective_tdee: float | None
    diet_deficit: float | None
    net_deficit: float | None
    diet_weekly_fat_change_kg: float | None
    net_weekly_fat_change_kg: float | None
    status: str | None
    targets: BodyTargets | None


def summarize_energy(
    profile: Profile,
    logs: Iterable[DailyLog],
    workouts: Mapping[str, list[WorkoutEntry]],
    today: date,
    activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
) -> EnergySummary:
    """Combine profile, logs and workouts into an energy summary."""
    bmr = calc_bmr(profile.weight_kg, profile.height_cm, profile.age, profile.gender)
    tdee = calc_tdee(bmr, activity_multiplier)
    intake = weekly_avg_intake(logs)
    burn = avg_burn(workouts, today)
    diet = diet_deficit(tdee, intake)
    net = net_deficit(tdee, burn, intake)
    return EnergySummary(
        bmr=bmr,
        tdee=tdee,
        activity_multiplier=activity_multiplier,
        avg_intake=intake,
        avg_burn=burn,
        today_burn=daily_burn(workouts, today.isoformat()),
        effective_tdee=tdee + burn if tdee is not None else None,
        diet_deficit=diet,
        net_deficit=net,
        diet_weekly_fat_change_kg=weekly_fat_change_kg(diet),
        net_weekly_fat_change_kg=weekly_fat_change_kg(net),
        status=classify_deficit(net),
        targets=body_targets(profile.weight_kg),
    )


@dataclass
class EnergyService:
    """Service computing energy balance from the stored user data."""

    profile_repository: ProfileRepository
    log_repository: LogRepository
    workout_repository: WorkoutRepository

    def summarize(
        self,
        username: str,
        activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
        today: date | None = None,
    ) -> EnergySummary:
        """Return the energy summary for a user."""
        profile = self.profile_repository.get_profile(username)
        if profile is None:
            raise LookupError(f"Unknown user: {username}")
        return summarize_energy(
            profile,
            self.log_repository.list_logs(username),
            self.workout_repository.list_workouts(username),
            today or date.today(),
            activity_multiplier,
        )
