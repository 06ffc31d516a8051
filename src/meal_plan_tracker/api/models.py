"""Pydantic models for API request payloads."""

import datetime

from pydantic import BaseModel, Field, model_validator

from meal_plan_tracker.domain.plans import PlanOptions


class PlanOptionsPayload(BaseModel):
    """Preferences for plan generation."""

    target_calories: float | None = Field(default=None, gt=0)
    vegetarian_only: bool = False
    vegan_only: bool = False
    high_protein: bool = False
    quick_meals: bool = False
    avoid_ids: list[str] = Field(default_factory=list)

    def to_options(
        self,
        default_calories: float = 2000.0,
        extra_avoid: frozenset[str] = frozenset(),
    ) -> PlanOptions:
        return PlanOptions(
            target_calories=self.target_calories or default_calories,
            vegetarian_only=self.vegetarian_only,
            vegan_only=self.vegan_only,
            high_protein=self.high_protein,
            quick_meals=self.quick_meals,
            avoid_ids=frozenset(self.avoid_ids) | extra_avoid,
        )


class PlanSlotsPayload(BaseModel):
    """A plan referenced by the catalog id chosen for each slot."""

    breakfast: str
    lunch: str
    dinner: str
    snack: str
    date: datetime.date | None = None


class RegenerateRequest(BaseModel):
    """Reselect one slot of an existing plan."""

    plan: PlanSlotsPayload
    slot: str
    options: PlanOptionsPayload = Field(default_factory=PlanOptionsPayload)


class ValidateRequest(BaseModel):
    """Check a plan against a calorie target."""

    plan: PlanSlotsPayload
    target_calories: float = Field(default=2000.0, gt=0)


class MealPayload(BaseModel):
    """A meal to schedule: a catalog id, or a custom entry already eaten."""

    slot: str
    food_id: str | None = None
    meal_id: str | None = None
    name: str | None = None
    name_bn: str | None = None
    calories: float | None = Field(default=None, ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _require_source(self) -> "MealPayload":
        if self.food_id is None and (not self.name or self.calories is None):
            raise ValueError("Provide food_id or a custom name and calories")
        return self


class ConsumedPayload(BaseModel):
    """Consumed flag for a scheduled meal."""

    consumed: bool = True


class WaterPayload(BaseModel):
    """Glasses of water drunk today."""

    glasses: int


class TaskPayload(BaseModel):
    """Text of a new checklist task."""

    text: str = Field(min_length=1)


class ProgressPayload(BaseModel):
    """Manually logged totals; non-numeric values are recorded as zero."""

    calories: float | str | None = None
    protein: float | str | None = None


class WeightPayload(BaseModel):
    """A weight measurement."""

    weight_kg: float = Field(gt=0)
    day: datetime.date | None = None
    notes: str | None = None
