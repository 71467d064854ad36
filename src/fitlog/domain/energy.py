"""Activity levels used for energy expenditure."""

ACTIVITY_MULTIPLIERS: dict[float, str] = {
    1.2: "Sedentary (desk job, little/no exercise)",
    1.375: "Lightly active (light exercise 1-3x/week)",
    1.55: "Moderately active (moderate exercise 3-5x)",
    1.725: "Very active (hard exercise 6-7x/week)",
    1.9: "Athlete (2x training/day, physical job)",
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.55
