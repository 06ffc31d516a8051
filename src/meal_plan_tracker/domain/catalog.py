"""Domain models for the food catalog."""

from dataclasses import dataclass
from enum import Enum


class MealSlot(str, Enum):
    """Planning buckets for a day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"

    @classmethod
    def parse(cls, raw: str) -> "MealSlot":
        """Parse a slot name, accepting the legacy plural ``snacks``."""
        value = raw.strip().lower()
        if value == "snacks":
            value = "snack"
        return cls(value)


@dataclass(frozen=True)
class NutrientTotals:
    """Summed nutrients over a list of foods."""

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float


@dataclass(frozen=True)
class FoodItem:
    """Read-only catalog entry."""

    id: str
    name: str
    name_bn: str
    slot: MealSlot
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    description: str = ""
    portion_size: str = ""
    health_tips: str = ""
    prep_time: str = ""
    is_vegetarian: bool = True
    is_vegan: bool = True
