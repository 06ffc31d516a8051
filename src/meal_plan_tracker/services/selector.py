"""Catalog item selection for a single meal slot.

Selection narrows the pool with the caller's filters, then prefers items whose
calories fall within a tolerance band of the target. Ties are broken at random
so repeated requests for the same target still vary. Preference filters are
soft: when they leave nothing, the pick falls back to the unfiltered pool.
"""

import logging
import random
import re
from dataclasses import replace

from meal_plan_tracker.domain.catalog import FoodItem
from meal_plan_tracker.domain.errors import CatalogEmptyError
from meal_plan_tracker.domain.plans import MealSelectionFilter

QUICK_MEAL_MINUTES = 30

_LEADING_INT_RE = re.compile(r"^\s*(\d+)")
_TIE_EPSILON = 1e-9

_logger = logging.getLogger(__name__)


def select_meal(
    pool: list[FoodItem],
    target_calories: float,
    selection: MealSelectionFilter,
    rng: random.Random | None = None,
    *,
    slot: str = "unknown",
) -> FoodItem:
    """Pick one item from ``pool`` for ``target_calories``.

    The explicit target is written into ``selection`` so the filter always
    carries the target that distances are measured against.
    """
    if not pool:
        raise CatalogEmptyError(slot)
    rng = rng or random.Random()
    if selection.target_calories != target_calories:
        selection = replace(selection, target_calories=target_calories)

    candidates = apply_filters(pool, selection)
    if not candidates:
        fallback = [item for item in pool if item.id not in selection.locked_ids]
        fallback = fallback or list(pool)
        _logger.info(
            "Filters left no items for target %.0f; picking from %s unfiltered",
            selection.target_calories,
            len(fallback),
        )
        return rng.choice(fallback)

    target = selection.target_calories
    distances = [(item, abs(item.calories - target)) for item in candidates]
    in_band = [item for item, diff in distances if diff <= selection.band]
    if in_band:
        return rng.choice(in_band)

    nearest = min(diff for _, diff in distances)
    ties = [item for item, diff in distances if diff - nearest <= _TIE_EPSILON]
    return rng.choice(ties)


def apply_filters(
    pool: list[FoodItem], selection: MealSelectionFilter
) -> list[FoodItem]:
    """Run the filter pipeline in order and return the surviving items."""
    blocked = selection.excluded_ids | selection.locked_ids
    filtered = [item for item in pool if item.id not in blocked]

    if selection.vegetarian_only:
        filtered = [item for item in filtered if item.is_vegetarian]

    if selection.vegan_only:
        filtered = [item for item in filtered if item.is_vegan]

    if selection.high_protein and filtered:
        mean_protein = sum(item.protein for item in filtered) / len(filtered)
        filtered = [item for item in filtered if item.protein >= mean_protein]

    if selection.quick_only and filtered:
        filtered = [item for item in filtered if _is_quick(item.prep_time)]

    return filtered


def parse_prep_minutes(prep_time: str) -> int | None:
    """Return the leading integer of a free-text preparation time."""
    match = _LEADING_INT_RE.match(prep_time or "")
    if match is None:
        return None
    return int(match.group(1))


def _is_quick(prep_time: str) -> bool:
    minutes = parse_prep_minutes(prep_time)
    return minutes is not None and minutes <= QUICK_MEAL_MINUTES
