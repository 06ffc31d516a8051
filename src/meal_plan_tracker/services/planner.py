"""Daily meal plan generation."""

import random
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import date

from meal_plan_tracker.domain.catalog import MealSlot
from meal_plan_tracker.domain.days import DayAggregate
from meal_plan_tracker.domain.plans import (
    DailyMealPlan,
    MealSelectionFilter,
    PlanOptions,
    PlanValidation,
)
from meal_plan_tracker.services.catalog import CatalogProvider
from meal_plan_tracker.services.selector import select_meal

CALORIE_DISTRIBUTION: dict[MealSlot, float] = {
    MealSlot.BREAKFAST: 0.25,
    MealSlot.LUNCH: 0.35,
    MealSlot.DINNER: 0.30,
    MealSlot.SNACK: 0.10,
}

CALORIES_PER_GRAM_PROTEIN = 4
CALORIES_PER_GRAM_CARBS = 4
MAX_CALORIE_DEVIATION_PCT = 10.0
MIN_PROTEIN_PCT = 15.0
CARB_RANGE_PCT = (45.0, 65.0)
RECENT_MEAL_LIMIT = 12


def slot_targets(target_calories: float) -> dict[MealSlot, float]:
    """Split a daily calorie target across slots."""
    return {
        slot: target_calories * share for slot, share in CALORIE_DISTRIBUTION.items()
    }


@dataclass
class MealPlanService:
    """Builds daily plans by selecting one catalog item per slot."""

    catalog: CatalogProvider
    rng: random.Random = field(default_factory=random.Random)
    today: Callable[[], date] = date.today
    meal_tolerance: float = 100.0
    snack_tolerance: float = 75.0
    regeneration_tolerance: float = 150.0

    def generate_plan(self, options: PlanOptions | None = None) -> DailyMealPlan:
        """Generate a plan for today from the given options."""
        options = options or PlanOptions()
        targets = slot_targets(options.target_calories)
        picks = {
            slot: select_meal(
                self.catalog.get_foods_by_meal_type(slot),
                targets[slot],
                self._filter(slot, targets[slot], options),
                self.rng,
                slot=slot.value,
            )
            for slot in MealSlot
        }
        return DailyMealPlan(
            breakfast=picks[MealSlot.BREAKFAST],
            lunch=picks[MealSlot.LUNCH],
            dinner=picks[MealSlot.DINNER],
            snack=picks[MealSlot.SNACK],
            date=self.today().isoformat(),
        )

    def regenerate_slot(
        self,
        plan: DailyMealPlan,
        slot: MealSlot,
        options: PlanOptions | None = None,
    ) -> DailyMealPlan:
        """Return a copy of ``plan`` with one slot reselected."""
        options = options or PlanOptions()
        target = slot_targets(options.target_calories)[slot]
        others = frozenset(
            plan.item_for(other).id for other in MealSlot if other is not slot
        )
        selection = replace(
            self._filter(slot, target, options),
            regenerate=True,
            locked_ids=others,
        )
        item = select_meal(
            self.catalog.get_foods_by_meal_type(slot),
            target,
            selection,
            self.rng,
            slot=slot.value,
        )
        return replace(plan, **{slot.value: item})

    def validate_plan(
        self, plan: DailyMealPlan, target_calories: float = 2000.0
    ) -> PlanValidation:
        """Return advisory warnings for a plan; never blocks generation."""
        return validate_plan(plan, target_calories)

    def _filter(
        self, slot: MealSlot, target: float, options: PlanOptions
    ) -> MealSelectionFilter:
        tolerance = (
            self.snack_tolerance if slot is MealSlot.SNACK else self.meal_tolerance
        )
        return MealSelectionFilter(
            target_calories=target,
            tolerance=tolerance,
            wide_tolerance=self.regeneration_tolerance,
            vegetarian_only=options.vegetarian_only,
            vegan_only=options.vegan_only,
            high_protein=options.high_protein,
            quick_only=options.quick_meals,
            excluded_ids=options.avoid_ids,
        )


def validate_plan(
    plan: DailyMealPlan, target_calories: float = 2000.0
) -> PlanValidation:
    """Check calorie deviation, protein share and carb share of a plan."""
    warnings: list[str] = []
    if target_calories > 0:
        deviation = abs(plan.total_calories - target_calories) / target_calories * 100
        if deviation > MAX_CALORIE_DEVIATION_PCT:
            warnings.append(f"Calories deviate by {deviation:.1f}% from target")

    if plan.total_calories <= 0:
        warnings.append("Plan has no calories")
        return PlanValidation(valid=False, warnings=warnings)

    protein_pct = (
        plan.total_protein * CALORIES_PER_GRAM_PROTEIN / plan.total_calories * 100
    )
    if protein_pct < MIN_PROTEIN_PCT:
        warnings.append(
            f"Low protein: {protein_pct:.1f}% (recommended: >{MIN_PROTEIN_PCT:.0f}%)"
        )

    carbs_pct = plan.total_carbs * CALORIES_PER_GRAM_CARBS / plan.total_calories * 100
    low, high = CARB_RANGE_PCT
    if carbs_pct < low or carbs_pct > high:
        warnings.append(
            f"Carbs outside optimal range: {carbs_pct:.1f}% "
            f"(recommended: {low:.0f}-{high:.0f}%)"
        )

    return PlanValidation(valid=not warnings, warnings=warnings)


def recent_meal_ids(
    days: Iterable[DayAggregate], limit: int = RECENT_MEAL_LIMIT
) -> frozenset[str]:
    """Return catalog ids of the most recently scheduled meals."""
    scheduled = [
        meal.food_id
        for day in sorted(days, key=lambda aggregate: aggregate.date)
        for meal in day.meals
        if meal.food_id
    ]
    return frozenset(scheduled[-limit:])
