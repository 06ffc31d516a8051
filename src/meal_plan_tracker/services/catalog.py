"""Static food catalog loaded from the packaged JSON database."""

import json
import logging
import re
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from meal_plan_tracker.domain.catalog import FoodItem, MealSlot, NutrientTotals

_logger = logging.getLogger(__name__)

_NON_VEGETARIAN_TOKENS = frozenset(
    {
        "beef",
        "mutton",
        "meat",
        "gosht",
        "chicken",
        "murgi",
        "fish",
        "mach",
        "machh",
        "rui",
        "rohu",
        "ilish",
        "hilsa",
        "pabda",
        "catfish",
        "prawn",
        "prawns",
        "shrimp",
        "chingri",
        "egg",
        "eggs",
        "dim",
        "omelette",
    }
)
_NON_VEGAN_TOKENS = _NON_VEGETARIAN_TOKENS | frozenset(
    {
        "milk",
        "dudh",
        "yogurt",
        "yoghurt",
        "doi",
        "curd",
        "ghee",
        "butter",
        "cheese",
        "paneer",
        "cream",
        "honey",
        "dairy",
    }
)
_WORD_RE = re.compile(r"[a-z]+")

HIGH_PROTEIN_GRAMS = 15.0
LOW_CALORIE_LIMIT = 200.0
SUGGESTION_LIMIT = 5


class CatalogProvider(Protocol):
    """Read access to the food catalog."""

    def get_foods_by_meal_type(self, slot: MealSlot) -> list[FoodItem]:
        """Return the catalog items for a slot."""


class FoodRecord(BaseModel):
    """Raw catalog entry as stored in the JSON database."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    name_bn: str = Field(default="", alias="banglaName")
    calories: float = Field(ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    fiber: float = Field(default=0.0, ge=0)
    description: str = ""
    portion_size: str = Field(default="", alias="portionSize")
    health_tips: str = Field(default="", alias="healthTips")
    prep_time: str = Field(default="", alias="prepTime")


class CatalogFile(BaseModel):
    """Top-level layout of the JSON database."""

    breakfast: list[FoodRecord] = Field(default_factory=list)
    lunch: list[FoodRecord] = Field(default_factory=list)
    dinner: list[FoodRecord] = Field(default_factory=list)
    snacks: list[FoodRecord] = Field(default_factory=list)


def derive_diet_flags(name: str, description: str) -> tuple[bool, bool]:
    """Return (is_vegetarian, is_vegan) from keywords in name and description."""
    tokens = set(_WORD_RE.findall(f"{name} {description}".lower()))
    is_vegetarian = not tokens & _NON_VEGETARIAN_TOKENS
    is_vegan = not tokens & _NON_VEGAN_TOKENS
    return is_vegetarian, is_vegan


def _to_food_item(record: FoodRecord, slot: MealSlot) -> FoodItem:
    is_vegetarian, is_vegan = derive_diet_flags(record.name, record.description)
    return FoodItem(
        id=record.id,
        name=record.name,
        name_bn=record.name_bn,
        slot=slot,
        calories=record.calories,
        protein=record.protein,
        carbs=record.carbs,
        fat=record.fat,
        fiber=record.fiber,
        description=record.description,
        portion_size=record.portion_size,
        health_tips=record.health_tips,
        prep_time=record.prep_time,
        is_vegetarian=is_vegetarian,
        is_vegan=is_vegan,
    )


@dataclass
class StaticFoodCatalog(CatalogProvider):
    """In-memory catalog grouped by slot."""

    foods: dict[MealSlot, list[FoodItem]] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "StaticFoodCatalog":
        """Build a catalog from a decoded JSON document."""
        parsed = CatalogFile.model_validate(payload)
        foods = {
            MealSlot.BREAKFAST: [
                _to_food_item(r, MealSlot.BREAKFAST) for r in parsed.breakfast
            ],
            MealSlot.LUNCH: [_to_food_item(r, MealSlot.LUNCH) for r in parsed.lunch],
            MealSlot.DINNER: [
                _to_food_item(r, MealSlot.DINNER) for r in parsed.dinner
            ],
            MealSlot.SNACK: [_to_food_item(r, MealSlot.SNACK) for r in parsed.snacks],
        }
        return cls(foods=foods)

    @classmethod
    def load(cls, path: str | None = None) -> "StaticFoodCatalog":
        """Load the catalog from a file, or from the packaged database."""
        if path:
            raw = Path(path).read_text(encoding="utf-8")
        else:
            raw = (
                resources.files("meal_plan_tracker.data")
                .joinpath("foods.json")
                .read_text(encoding="utf-8")
            )
        catalog = cls.from_payload(json.loads(raw))
        _logger.info(
            "Loaded food catalog: %s",
            {slot.value: len(items) for slot, items in catalog.foods.items()},
        )
        return catalog

    def get_foods_by_meal_type(self, slot: MealSlot) -> list[FoodItem]:
        """Return items for a slot; an unknown slot yields an empty list."""
        return list(self.foods.get(slot, []))

    def all_foods(self) -> list[FoodItem]:
        """Return every item in slot order."""
        return [item for slot in MealSlot for item in self.foods.get(slot, [])]

    def search(self, query: str) -> list[FoodItem]:
        """Search by English name, Bangla name or description."""
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            food
            for food in self.all_foods()
            if needle in food.name.lower()
            or query.strip() in food.name_bn
            or needle in food.description.lower()
        ]

    def get_by_name(self, name: str) -> FoodItem | None:
        """Return the item whose English or Bangla name matches exactly."""
        for food in self.all_foods():
            if food.name.lower() == name.lower() or food.name_bn == name:
                return food
        return None

    def get_by_id(self, food_id: str) -> FoodItem | None:
        """Return the item with the given id."""
        for food in self.all_foods():
            if food.id == food_id:
                return food
        return None

    def by_calorie_range(self, minimum: float, maximum: float) -> list[FoodItem]:
        """Return items with calories in ``[minimum, maximum]``."""
        return [
            food for food in self.all_foods() if minimum <= food.calories <= maximum
        ]

    def high_protein(self) -> list[FoodItem]:
        return [food for food in self.all_foods() if food.protein >= HIGH_PROTEIN_GRAMS]

    def low_calorie(self) -> list[FoodItem]:
        return [food for food in self.all_foods() if food.calories < LOW_CALORIE_LIMIT]

    def suggestions(
        self, slot: MealSlot, target_calories: float, vegetarian: bool = False
    ) -> list[FoodItem]:
        """Return the items closest to a calorie target, nearest first."""
        foods = self.get_foods_by_meal_type(slot)
        if vegetarian:
            foods = [food for food in foods if food.is_vegetarian]
        ranked = sorted(foods, key=lambda food: abs(food.calories - target_calories))
        return ranked[:SUGGESTION_LIMIT]


def calculate_totals(foods: list[FoodItem]) -> NutrientTotals:
    """Sum nutrients over a list of foods."""
    return NutrientTotals(
        calories=sum(food.calories for food in foods),
        protein=sum(food.protein for food in foods),
        carbs=sum(food.carbs for food in foods),
        fat=sum(food.fat for food in foods),
        fiber=sum(food.fiber for food in foods),
    )
