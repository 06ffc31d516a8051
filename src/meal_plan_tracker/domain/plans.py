"""Domain models for generated meal plans."""

from dataclasses import dataclass, field

from meal_plan_tracker.domain.catalog import FoodItem, MealSlot


@dataclass(frozen=True)
class MealSelectionFilter:
    """Constraints applied when picking a single catalog item."""

    target_calories: float
    tolerance: float = 100.0
    wide_tolerance: float = 150.0
    regenerate: bool = False
    vegetarian_only: bool = False
    vegan_only: bool = False
    high_protein: bool = False
    quick_only: bool = False
    excluded_ids: frozenset[str] = frozenset()
    locked_ids: frozenset[str] = frozenset()

    @property
    def band(self) -> float:
        """Calorie distance accepted as a close match."""
        return self.wide_tolerance if self.regenerate else self.tolerance


@dataclass(frozen=True)
class PlanOptions:
    """Caller preferences for plan generation."""

    target_calories: float = 2000.0
    vegetarian_only: bool = False
    vegan_only: bool = False
    high_protein: bool = False
    quick_meals: bool = False
    avoid_ids: frozenset[str] = frozenset()


@dataclass(frozen=True)
class DailyMealPlan:
    """One catalog item per slot with totals derived from the slots."""

    breakfast: FoodItem
    lunch: FoodItem
    dinner: FoodItem
    snack: FoodItem
    date: str
    total_calories: float = field(init=False)
    total_protein: float = field(init=False)
    total_carbs: float = field(init=False)
    total_fat: float = field(init=False)

    def __post_init__(self) -> None:
        items = self.items()
        object.__setattr__(
            self, "total_calories", sum(item.calories for item in items)
        )
        object.__setattr__(self, "total_protein", sum(item.protein for item in items))
        object.__setattr__(self, "total_carbs", sum(item.carbs for item in items))
        object.__setattr__(self, "total_fat", sum(item.fat for item in items))

    def items(self) -> list[FoodItem]:
        """Return slot items in breakfast, lunch, dinner, snack order."""
        return [self.breakfast, self.lunch, self.dinner, self.snack]

    def item_for(self, slot: MealSlot) -> FoodItem:
        """Return the item planned for a slot."""
        return getattr(self, slot.value)


@dataclass(frozen=True)
class PlanValidation:
    """Advisory result of checking a plan against nutrition targets."""

    valid: bool
    warnings: list[str]
