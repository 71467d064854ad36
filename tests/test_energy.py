"""Tests for energy balance estimates."""

from dataclasses import replace
from datetime import date

import pytest

from fitlog.domain.logs import DailyLog
from fitlog.services.energy import (
    STATUS_AGGRESSIVE,
    STATUS_MAINTENANCE,
    STATUS_MODERATE,
    STATUS_SAFE_CUT,
    STATUS_SURPLUS,
    EnergyService,
    avg_burn,
    body_targets,
    calc_bmr,
    calc_tdee,
    classify_deficit,
    diet_deficit,
    net_deficit,
    weekly_avg_intake,
    weekly_fat_change_kg,
)
from tests.conftest import (
    InMemoryLogRepository,
    InMemoryProfileRepository,
    InMemoryWorkoutRepository,
    make_entry,
)


def test_calc_bmr_mifflin_st_jeor() -> None:
    assert calc_bmr(72.5, 175, 30, "male") == 1673.75
    assert calc_bmr(72.5, 175, 30, "Female") == 1507.75


@pytest.mark.parametrize(
    ("weight", "height", "age", "gender"),
    [
        (72.5, 175, 30, "other"),
        (72.5, 175, 30, "prefer-not-to-say"),
        (None, 175, 30, "male"),
        (72.5, 0, 30, "male"),
        (72.5, 175, -1, "male"),
    ],
)
def test_calc_bmr_unavailable(weight, height, age, gender) -> None:
    assert calc_bmr(weight, height, age, gender) is None


def test_calc_tdee_uses_unrounded_bmr() -> None:
    assert calc_tdee(1673.75, 1.55) == 2594
    assert calc_tdee(1673.75) == 2594
    assert calc_tdee(None, 1.2) is None


def test_calc_tdee_rejects_unknown_multiplier() -> None:
    with pytest.raises(ValueError):
        calc_tdee(1673.75, 1.3)


def test_weekly_avg_intake_uses_seven_most_recent_tracked_logs() -> None:
    logs = [DailyLog(date=f"2024-01-0{day}", calories=1000.0) for day in range(1, 3)]
    logs += [DailyLog(date=f"2024-01-{day:02d}", calories=2000.0) for day in range(3, 9)]
    logs.append(DailyLog(date="2024-01-09", calories=None))
    logs.append(DailyLog(date="2024-01-10", calories=2700.0))

    # 01-10 plus 01-03..01-08; the untracked 01-09 is skipped.
    assert weekly_avg_intake(logs) == pytest.approx((2700 + 6 * 2000) / 7)


def test_weekly_avg_intake_without_data() -> None:
    assert weekly_avg_intake([]) is None
    assert weekly_avg_intake([DailyLog(date="2024-01-01")]) is None


def test_avg_burn_divides_by_seven_days() -> None:
    workouts = {
        "2024-01-07": [make_entry("2024-01-07", calories_burned=200)],
        "2024-01-01": [make_entry("2024-01-01", calories_burned=140)],
        "2023-12-31": [make_entry("2023-12-31", calories_burned=1000)],
    }

    assert avg_burn(workouts, date(2024, 1, 7)) == pytest.approx(340 / 7)
    assert avg_burn({}, date(2024, 1, 7)) == 0


def test_deficits_and_projection() -> None:
    assert diet_deficit(2500, 2000) == 500
    assert net_deficit(2500, 300, 2000) == 800
    assert diet_deficit(None, 2000) is None
    assert net_deficit(2500, 300, None) is None
    assert weekly_fat_change_kg(550) == pytest.approx(0.5)
    assert weekly_fat_change_kg(-1100) == pytest.approx(-1.0)
    assert weekly_fat_change_kg(None) is None


@pytest.mark.parametrize(
    ("deficit", "status"),
    [
        (500, STATUS_SAFE_CUT),
        (200, STATUS_SAFE_CUT),
        (500.5, STATUS_MODERATE),
        (700, STATUS_MODERATE),
        (701, STATUS_AGGRESSIVE),
        (199, STATUS_MAINTENANCE),
        (-50, STATUS_MAINTENANCE),
        (-51, STATUS_SURPLUS),
        (None, None),
    ],
)
def test_classify_deficit_boundaries(deficit, status) -> None:
    assert classify_deficit(deficit) == status


def test_body_targets() -> None:
    targets = body_targets(80)

    assert targets is not None
    assert targets.protein_maintenance_g == 96
    assert targets.protein_cut_low_g == 128
    assert targets.protein_cut_high_g == 160
    assert targets.water_l == 2.8
    assert body_targets(None) is None


def test_energy_service_summarizes_user(
    energy_service: EnergyService,
    log_repository: InMemoryLogRepository,
    workout_repository: InMemoryWorkoutRepository,
) -> None:
    for day in range(1, 8):
        log_repository.save_log("alice", DailyLog(date=f"2024-01-0{day}", calories=2100))
    workout_repository.save_bucket(
        "alice", "2024-01-07", [make_entry("2024-01-07", calories_burned=350)]
    )

    summary = energy_service.summarize("alice", today=date(2024, 1, 7))

    # 70 kg, 175 cm, 30 y male: BMR 1648.75, TDEE 2555.56 rounds to 2556.
    assert summary.bmr == 1648.75
    assert summary.tdee == 2556
    assert summary.avg_intake == 2100
    assert summary.avg_burn == 50
    assert summary.today_burn == 350
    assert summary.effective_tdee == 2606
    assert summary.diet_deficit == 456
    assert summary.net_deficit == 506
    assert summary.status == STATUS_MODERATE
    assert summary.targets is not None
    assert summary.targets.protein_maintenance_g == 84


def test_energy_service_without_formula_gender(
    energy_service: EnergyService, profile_repository: InMemoryProfileRepository
) -> None:
    alice = profile_repository.profiles["alice"]
    profile_repository.save_profile(replace(alice, gender="other"))

    summary = energy_service.summarize("alice", today=date(2024, 1, 7))

    assert summary.bmr is None
    assert summary.tdee is None
    assert summary.effective_tdee is None
    assert summary.net_deficit is None
    assert summary.status is None


def test_energy_service_unknown_user(energy_service: EnergyService) -> None:
    with pytest.raises(LookupError):
        energy_service.summarize("nobody")
