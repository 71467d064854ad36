"""Streaks, weekly activity, personal records and weight progress."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from fitlog.domain.energy import DEFAULT_ACTIVITY_MULTIPLIER
from fitlog.domain.logs import DailyLog
from fitlog.domain.profiles import DEFAULT_WEEKLY_ACTIVE_MINUTES
from fitlog.domain.workouts import CATEGORY_ORDER, OTHER, WorkoutEntry
from fitlog.services.energy import calc_bmr, calc_tdee, daily_burn
from fitlog.services.macros import round1, round_half_up
from fitlog.services.meals import LogRepository
from fitlog.services.profiles import ProfileRepository
from fitlog.services.workouts import WorkoutRepository

STREAK_LOGS = "logs"
STREAK_WORKOUTS = "workouts"
WINDOW_DAYS = 7
SUMMARY_WINDOW_LOGS = 7
ROLLING_WINDOW_LOGS = 7

DIRECTION_LOSS = "loss"
DIRECTION_GAIN = "gain"
DIRECTION_NONE = "none"
# Weight changes smaller than this are noise.
DIRECTION_THRESHOLD_KG = 0.05
GOAL_MIN_SPAN_KG = 0.1
FALLBACK_GOAL_FRACTION = 0.10

_logger = logging.getLogger(__name__)


class StreakRepository(Protocol):
    """Persistence interface for best-ever streaks."""

    def get_best_streak(self, username: str, kind: str) -> int:
        """Return the stored best streak, 0 when none."""

    def set_best_streak(self, username: str, kind: str, value: int) -> None:
        """Store a new best streak."""


def current_streak(
    active_days: Iterable[str], today: date, *, grace_day: bool = True
) -> int:
    """Consecutive active days ending today.

    With `grace_day` a streak that ended yesterday still counts until today
    is over.
    """
    days = set(active_days)
    start = today
    if start.isoformat() not in days:
        if not grace_day:
            return 0
        start = today - timedelta(days=1)
        if start.isoformat() not in days:
            return 0
    streak = 0
    cursor = start
    while cursor.isoformat() in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def workout_days(workouts: Mapping[str, list[WorkoutEntry]]) -> set[str]:
    return {day for day, entries in workouts.items() if entries}


def _window(today: date) -> list[str]:
    return [(today - timedelta(days=i)).isoformat() for i in range(WINDOW_DAYS)]


def weekly_minutes(workouts: Mapping[str, list[WorkoutEntry]], today: date) -> float:
    """Active minutes over today and the six days before."""
    return sum(
        entry.duration_min for day in _window(today) for entry in workouts.get(day, [])
    )


def category_breakdown(
    workouts: Mapping[str, list[WorkoutEntry]], today: date
) -> dict[str, float]:
    """Minutes per category over the last seven days."""
    breakdown = dict.fromkeys(CATEGORY_ORDER, 0.0)
    for day in _window(today):
        for entry in workouts.get(day, []):
            category = entry.category if entry.category in breakdown else OTHER
            breakdown[category] += entry.duration_min
    return breakdown


@dataclass(frozen=True)
class PersonalRecords:
    longest_session_min: float
    highest_single_burn: int
    highest_daily_burn: int


def personal_records(workouts: Mapping[str, list[WorkoutEntry]]) -> PersonalRecords:
    longest = 0.0
    single = 0
    daily = 0
    for entries in workouts.values():
        daily = max(daily, sum(entry.calories_burned for entry in entries))
        for entry in entries:
            longest = max(longest, entry.duration_min)
            single = max(single, entry.calories_burned)
    return PersonalRecords(
        longest_session_min=longest,
        highest_single_burn=single,
        highest_daily_burn=daily,
    )


def weekly_goal_pct(minutes: float, goal_minutes: int) -> float:
    """Progress toward the weekly goal as a percentage, capped at 100."""
    goal = goal_minutes or DEFAULT_WEEKLY_ACTIVE_MINUTES
    return min(100.0, minutes / goal * 100)


@dataclass(frozen=True)
class WorkoutOverview:
    """Workout page analytics for one user."""

    streak: int
    best_streak: int
    weekly_minutes: float
    weekly_goal_minutes: int
    weekly_goal_pct: float
    records: PersonalRecords
    breakdown: dict[str, float]


def _round2(value: float) -> float:
    return round_half_up(value * 100) / 100


def _weighed(logs: Iterable[DailyLog]) -> list[DailyLog]:
    return sorted(
        (log for log in logs if log.morning_weight_kg is not None),
        key=lambda log: log.date,
    )


def _mean(values: Iterable[float | None]) -> float | None:
    present = [value for value in values if value is not None]
    if not present:
        return None
    return round1(sum(present) / len(present))


@dataclass(frozen=True)
class LogSummary:
    """Weight change since the first weigh-in and recent averages."""

    start_weight_kg: float | None
    latest_weight_kg: float | None
    total_change_kg: float | None
    avg_calories: float | None
    avg_protein_g: float | None
    avg_steps: float | None


def summarize_logs(logs: Iterable[DailyLog]) -> LogSummary:
    """Summarize logs; averages cover the 7 most recent logs, skipping blanks."""
    ordered = sorted(logs, key=lambda log: log.date)
    weighed = _weighed(ordered)
    start = weighed[0].morning_weight_kg if weighed else None
    latest = weighed[-1].morning_weight_kg if weighed else None
    recent = ordered[-SUMMARY_WINDOW_LOGS:]
    return LogSummary(
        start_weight_kg=start,
        latest_weight_kg=latest,
        total_change_kg=round1(latest - start) if weighed else None,
        avg_calories=_mean(log.calories for log in recent),
        avg_protein_g=_mean(log.protein_g for log in recent),
        avg_steps=_mean(log.steps for log in recent),
    )


@dataclass(frozen=True)
class WeightPoint:
    date: str
    weight_kg: float
    rolling_avg_kg: float


def rolling_weight_average(
    logs: Iterable[DailyLog], window: int = ROLLING_WINDOW_LOGS
) -> list[WeightPoint]:
    """Weigh-ins by date, each with the trailing mean of up to `window` of them."""
    weighed = _weighed(logs)
    points = []
    for index, log in enumerate(weighed):
        recent = weighed[max(0, index - window + 1) : index + 1]
        mean = sum(entry.morning_weight_kg for entry in recent) / len(recent)
        points.append(
            WeightPoint(
                date=log.date,
                weight_kg=log.morning_weight_kg,
                rolling_avg_kg=_round2(mean),
            )
        )
    return points


@dataclass(frozen=True)
class WeightProgress:
    pct: float
    direction: str
    change_kg: float | None


def weight_goal_progress(
    start_kg: float | None, current_kg: float | None, goal_kg: float | None
) -> WeightProgress:
    """Progress from the start weight toward the goal, clamped to 0-100%.

    A missing goal, or one within 0.1 kg of the start, measures progress
    against a 10% change of the start weight instead.
    """
    if start_kg is None or current_kg is None:
        return WeightProgress(pct=0.0, direction=DIRECTION_NONE, change_kg=None)
    lost = start_kg - current_kg
    if lost > DIRECTION_THRESHOLD_KG:
        direction = DIRECTION_LOSS
    elif lost < -DIRECTION_THRESHOLD_KG:
        direction = DIRECTION_GAIN
    else:
        direction = DIRECTION_NONE
    if goal_kg and abs(start_kg - goal_kg) > GOAL_MIN_SPAN_KG:
        pct = abs(lost) / abs(start_kg - goal_kg) * 100
    elif start_kg > 0:
        pct = abs(lost) / (start_kg * FALLBACK_GOAL_FRACTION) * 100
    else:
        pct = 0.0
    return WeightProgress(
        pct=min(100.0, max(0.0, pct)),
        direction=direction,
        change_kg=round1(current_kg - start_kg),
    )


def today_net_deficit(
    tdee: float | None, today_burn: float, today_intake: float | None
) -> float | None:
    """Today's deficit including workouts; negative is a surplus."""
    if tdee is None or today_intake is None:
        return None
    return tdee + today_burn - today_intake


@dataclass(frozen=True)
class ProgressOverview:
    """Dashboard analytics: weight progress and today's energy balance."""

    summary: LogSummary
    weight_trend: list[WeightPoint]
    goal_weight_kg: float | None
    goal_progress: WeightProgress
    tdee: int | None
    today_intake: float | None
    today_burn: int
    today_net_deficit: float | None


@dataclass
class AnalyticsService:
    """Service for streaks and workout analytics."""

    profile_repository: ProfileRepository
    log_repository: LogRepository
    workout_repository: WorkoutRepository
    streak_repository: StreakRepository

    def log_streak(self, username: str, today: date | None = None) -> int:
        """Consecutive days with a saved daily log, counted from today."""
        days = {log.date for log in self.log_repository.list_logs(username)}
        return current_streak(days, today or date.today(), grace_day=False)

    def workout_streak(self, username: str, today: date | None = None) -> int:
        workouts = self.workout_repository.list_workouts(username)
        return current_streak(workout_days(workouts), today or date.today())

    def refresh_best_streak(self, username: str, kind: str, streak: int) -> int:
        """Raise the stored best streak if `streak` beats it; never lowers it."""
        best = self.streak_repository.get_best_streak(username, kind)
        if streak > best:
            _logger.info(
                "New best streak: user=%s kind=%s streak=%s", username, kind, streak
            )
            self.streak_repository.set_best_streak(username, kind, streak)
            return streak
        return best

    def workout_overview(
        self, username: str, today: date | None = None
    ) -> WorkoutOverview:
        """Streak, weekly goal progress, records and category split."""
        profile = self.profile_repository.get_profile(username)
        if profile is None:
            raise LookupError(f"Unknown user: {username}")
        today = today or date.today()
        workouts = self.workout_repository.list_workouts(username)
        streak = current_streak(workout_days(workouts), today)
        minutes = weekly_minutes(workouts, today)
        goal = profile.weekly_active_minutes_goal or DEFAULT_WEEKLY_ACTIVE_MINUTES
        return WorkoutOverview(
            streak=streak,
            best_streak=self.refresh_best_streak(username, STREAK_WORKOUTS, streak),
            weekly_minutes=minutes,
            weekly_goal_minutes=goal,
            weekly_goal_pct=weekly_goal_pct(minutes, goal),
            records=personal_records(workouts),
            breakdown=category_breakdown(workouts, today),
        )

    def progress_overview(
        self,
        username: str,
        activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
        today: date | None = None,
    ) -> ProgressOverview:
        """Weight summary, trend, goal progress and today's net deficit."""
        profile = self.profile_repository.get_profile(username)
        if profile is None:
            raise LookupError(f"Unknown user: {username}")
        today_key = (today or date.today()).isoformat()
        logs = self.log_repository.list_logs(username)
        workouts = self.workout_repository.list_workouts(username)
        summary = summarize_logs(logs)
        bmr = calc_bmr(
            profile.weight_kg, profile.height_cm, profile.age, profile.gender
        )
        tdee = calc_tdee(bmr, activity_multiplier)
        today_log = next((log for log in logs if log.date == today_key), None)
        intake = today_log.calories if today_log is not None else None
        burn = daily_burn(workouts, today_key)
        goal = profile.goal_weight_kg or None
        return ProgressOverview(
            summary=summary,
            weight_trend=rolling_weight_average(logs),
            goal_weight_kg=goal,
            goal_progress=weight_goal_progress(
                summary.start_weight_kg, summary.latest_weight_kg, goal
            ),
            tdee=tdee,
            today_intake=intake,
            today_burn=burn,
            today_net_deficit=today_net_deficit(tdee, burn, intake),
        )
