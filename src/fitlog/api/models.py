"""Pydantic request models for the HTTP API."""

from pydantic import BaseModel, Field

from fitlog.domain.nutrition import MacroQuantity, SearchCandidate


class MacroBody(BaseModel):
    """Macro values; per 100 g or for the whole portion depending on context."""

    calories: float = Field(default=0.0, ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(default=0.0, ge=0)
    fiber_g: float = Field(default=0.0, ge=0)

    def to_domain(self) -> MacroQuantity:
        return MacroQuantity(**self.model_dump())


class CandidateBody(BaseModel):
    """A search result picked by the user."""

    external_id: str | None = None
    name: str
    brand: str | None = None
    per100g: MacroBody

    def to_domain(self) -> SearchCandidate:
        return SearchCandidate(
            external_id=self.external_id,
            name=self.name,
            brand=self.brand,
            per100g=self.per100g.to_domain(),
        )


class ProfileCreate(BaseModel):
    name: str = ""
    age: int | None = None
    gender: str = ""
    height_cm: float | None = None
    weight_kg: float | None = None
    diet_category: str = ""
    goal_weight_kg: float | None = None


class ProfileUpdate(BaseModel):
    """Partial profile edit; only fields sent are changed."""

    name: str | None = None
    age: int | None = None
    gender: str | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    diet_category: str | None = None
    goal_weight_kg: float | None = None


class GoalsUpdate(BaseModel):
    weekly_active_minutes_goal: int | None = None
    preferred_deficit: int | None = None


class MealItemRequest(BaseModel):
    """Build a food item from a search selection or from manual entry."""

    mode: str
    grams: float
    id: str | None = None
    candidate: CandidateBody | None = None
    name: str = ""
    basis: str = "per100g"
    values: MacroBody | None = None


class LogSaveRequest(BaseModel):
    """Full replacement of one day's log.

    With `auto_fill` the macro fields are derived from the meals and any
    typed values are ignored.
    """

    meals: dict[str, object] = Field(default_factory=dict)
    auto_fill: bool = True
    calories: float | None = Field(default=None, ge=0)
    protein_g: float | None = Field(default=None, ge=0)
    carbs_g: float | None = Field(default=None, ge=0)
    fat_g: float | None = Field(default=None, ge=0)
    fiber_g: float | None = Field(default=None, ge=0)
    morning_weight_kg: float | None = Field(default=None, gt=0)
    steps: int | None = Field(default=None, ge=0)
    notes: str = ""


class WorkoutRequest(BaseModel):
    """Log a library, custom or explicit-MET workout.

    `intensity` selects a custom workout; `met` logs with an explicit MET;
    otherwise `name` must be a library activity.
    """

    date: str
    name: str = ""
    duration_min: float
    category: str = "Other"
    intensity: str | None = None
    met: float | None = None


class CopyPlanRequest(BaseModel):
    seed: int = 0
    deficit: int | None = None
    activity: str | None = None
