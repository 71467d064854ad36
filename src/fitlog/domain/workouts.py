"""Domain models and reference data for workouts."""

from dataclasses import dataclass

CARDIO = "Cardio"
STRENGTH = "Strength"
OTHER = "Other"
CATEGORY_ORDER = (CARDIO, STRENGTH, OTHER)

INTENSITY_METS: dict[str, dict[str, float]] = {
    CARDIO: {"Easy": 4.0, "Moderate": 6.5, "Hard": 10.0},
    STRENGTH: {"Easy": 3.0, "Moderate": 5.0, "Hard": 6.5},
    OTHER: {"Easy": 3.5, "Moderate": 5.5, "Hard": 8.0},
}
DEFAULT_MET = 5.0


@dataclass(frozen=True)
class WorkoutEntry:
    """A logged workout; `calories_burned` is frozen at logging time."""

    id: str
    date: str
    workout_name: str
    category: str
    duration_min: float
    met: float
    calories_burned: int


@dataclass(frozen=True)
class WorkoutTemplate:
    """Library activity with its MET value."""

    name: str
    category: str
    met: float


# MET values from the Compendium of Physical Activities (Ainsworth et al.).
WORKOUT_LIBRARY: tuple[WorkoutTemplate, ...] = (
    WorkoutTemplate("Walking (3 km/h)", CARDIO, 2.5),
    WorkoutTemplate("Walking (5 km/h)", CARDIO, 3.5),
    WorkoutTemplate("Jogging", CARDIO, 7.0),
    WorkoutTemplate("Running (8 km/h)", CARDIO, 8.3),
    WorkoutTemplate("Running (10 km/h)", CARDIO, 9.8),
    WorkoutTemplate("Cycling (moderate)", CARDIO, 6.0),
    WorkoutTemplate("Cycling (intense)", CARDIO, 10.0),
    WorkoutTemplate("Treadmill (incline)", CARDIO, 8.0),
    WorkoutTemplate("Stair climbing", CARDIO, 8.8),
    WorkoutTemplate("Jump rope", CARDIO, 10.0),
    WorkoutTemplate("Weight lifting (light)", STRENGTH, 3.0),
    WorkoutTemplate("Weight lifting (moderate)", STRENGTH, 5.0),
    WorkoutTemplate("Weight lifting (intense)", STRENGTH, 6.0),
    WorkoutTemplate("Bodyweight workout", STRENGTH, 5.0),
    WorkoutTemplate("Squats", STRENGTH, 5.0),
    WorkoutTemplate("Lunges", STRENGTH, 4.0),
    WorkoutTemplate("Pushups", STRENGTH, 4.5),
    WorkoutTemplate("Crunches", STRENGTH, 3.8),
    WorkoutTemplate("Planks", STRENGTH, 3.0),
    WorkoutTemplate("Deadlifts", STRENGTH, 6.0),
    WorkoutTemplate("Yoga", OTHER, 3.0),
    WorkoutTemplate("Pilates", OTHER, 3.5),
    WorkoutTemplate("Zumba", OTHER, 6.5),
    WorkoutTemplate("HIIT", OTHER, 8.0),
    WorkoutTemplate("Swimming", OTHER, 7.0),
    WorkoutTemplate("Badminton", OTHER, 5.5),
    WorkoutTemplate("Football", OTHER, 8.0),
)
