"""Domain models for per-day tracking."""

from dataclasses import dataclass, field
from uuid import uuid4

from meal_plan_tracker.domain.catalog import FoodItem, MealSlot


@dataclass(frozen=True)
class MealItem:
    """A meal scheduled on a day, with macros frozen at scheduling time."""

    id: str
    name: str
    meal_type: MealSlot
    calories: float
    protein: float
    carbs: float = 0.0
    fat: float = 0.0
    consumed: bool = False
    name_bn: str | None = None
    food_id: str | None = None
    scheduled_date: str | None = None

    @classmethod
    def from_food(
        cls, food: FoodItem, slot: MealSlot | None = None, day: str | None = None
    ) -> "MealItem":
        """Copy a catalog item into a new scheduled meal."""
        return cls(
            id=str(uuid4()),
            name=food.name,
            name_bn=food.name_bn,
            meal_type=slot or food.slot,
            calories=food.calories,
            protein=food.protein,
            carbs=food.carbs,
            fat=food.fat,
            food_id=food.id,
            scheduled_date=day,
        )


@dataclass(frozen=True)
class DailyTask:
    """A checklist entry for a day."""

    id: str
    text: str
    completed: bool = False


@dataclass(frozen=True)
class DailyGoals:
    """Daily nutrition and hydration targets."""

    calories: float
    protein: float
    water: int


@dataclass(frozen=True)
class DayAggregate:
    """Everything tracked for one calendar date."""

    date: str
    goals: DailyGoals
    meals: tuple[MealItem, ...] = ()
    tasks: tuple[DailyTask, ...] = ()
    water_glasses: int = 0
    total_calories: float = 0.0
    total_protein: float = 0.0
    consumed_calories: float = 0.0
    consumed_protein: float = 0.0
    manual_override: bool = False
    id: str = field(default_factory=lambda: str(uuid4()))

    def find_meal(self, meal_id: str) -> MealItem | None:
        """Return the scheduled meal with the given id, if present."""
        for meal in self.meals:
            if meal.id == meal_id:
                return meal
        return None

    @property
    def has_activity(self) -> bool:
        """True when anything was eaten on this day."""
        return self.consumed_calories > 0 or self.consumed_protein > 0
