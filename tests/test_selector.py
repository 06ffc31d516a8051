"""Tests for single-slot meal selection."""

import random
from collections import Counter

import pytest

from meal_plan_tracker.domain.catalog import MealSlot
from meal_plan_tracker.domain.errors import CatalogEmptyError
from meal_plan_tracker.domain.plans import MealSelectionFilter
from meal_plan_tracker.services.selector import (
    apply_filters,
    parse_prep_minutes,
    select_meal,
)
from tests.conftest import make_food


def test_select_meal_only_returns_items_inside_band() -> None:
    pool = [
        make_food("a", 100),
        make_food("b", 250),
        make_food("c", 260),
        make_food("d", 400),
    ]
    selection = MealSelectionFilter(target_calories=255, tolerance=10)
    rng = random.Random(1)

    picks = Counter(select_meal(pool, 255, selection, rng).id for _ in range(1000))

    assert set(picks) == {"b", "c"}
    assert picks["b"] > 0
    assert picks["c"] > 0


def test_select_meal_breaks_ties_between_duplicate_calories() -> None:
    pool = [
        make_food("low", 50),
        make_food("first", 300),
        make_food("second", 300),
        make_food("high", 500),
    ]
    selection = MealSelectionFilter(target_calories=200, tolerance=50)
    rng = random.Random(2)

    picks = Counter(select_meal(pool, 200, selection, rng).id for _ in range(500))

    assert set(picks) == {"first", "second"}


def test_select_meal_includes_every_item_at_minimum_distance() -> None:
    pool = [
        make_food("a", 100),
        make_food("b", 300),
        make_food("c", 300),
        make_food("d", 500),
    ]
    selection = MealSelectionFilter(target_calories=200, tolerance=50)
    rng = random.Random(3)

    picks = Counter(select_meal(pool, 200, selection, rng).id for _ in range(600))

    assert "d" not in picks
    assert set(picks) == {"a", "b", "c"}


def test_select_meal_uses_wide_band_when_regenerating() -> None:
    pool = [make_food("near", 520), make_food("far", 640)]
    rng = random.Random(4)
    tight = MealSelectionFilter(target_calories=500, tolerance=100)
    wide = MealSelectionFilter(
        target_calories=500, tolerance=100, wide_tolerance=150, regenerate=True
    )

    tight_picks = {select_meal(pool, 500, tight, rng).id for _ in range(200)}
    wide_picks = {select_meal(pool, 500, wide, rng).id for _ in range(200)}

    assert tight_picks == {"near"}
    assert wide_picks == {"near", "far"}


def test_select_meal_falls_back_when_no_vegan_items() -> None:
    pool = [
        make_food("fish", 500, is_vegetarian=False, is_vegan=False),
        make_food("yogurt", 300, is_vegan=False),
    ]
    selection = MealSelectionFilter(target_calories=400, vegan_only=True)

    item = select_meal(pool, 400, selection, random.Random(5))

    assert item in pool


def test_select_meal_fallback_skips_locked_items() -> None:
    pool = [
        make_food("locked", 500, is_vegan=False),
        make_food("open", 900, is_vegan=False),
    ]
    selection = MealSelectionFilter(
        target_calories=500, vegan_only=True, locked_ids=frozenset({"locked"})
    )
    rng = random.Random(6)

    picks = {select_meal(pool, 500, selection, rng).id for _ in range(100)}

    assert picks == {"open"}


def test_select_meal_fallback_uses_full_pool_when_everything_locked() -> None:
    pool = [make_food("only", 500)]
    selection = MealSelectionFilter(
        target_calories=500, locked_ids=frozenset({"only"})
    )

    assert select_meal(pool, 500, selection, random.Random(7)).id == "only"


def test_select_meal_raises_for_empty_pool() -> None:
    selection = MealSelectionFilter(target_calories=500)

    with pytest.raises(CatalogEmptyError) as excinfo:
        select_meal([], 500, selection, slot=MealSlot.DINNER.value)

    assert excinfo.value.slot == "dinner"


def test_select_meal_exact_match_is_candidate_at_zero_tolerance() -> None:
    pool = [make_food("exact", 500, slot=MealSlot.BREAKFAST), make_food("x", 501)]
    selection = MealSelectionFilter(target_calories=500, tolerance=0)

    picks = {
        select_meal(pool, 500, selection, random.Random(seed)).id
        for seed in range(20)
    }

    assert picks == {"exact"}


def test_apply_filters_keeps_above_average_protein() -> None:
    pool = [
        make_food("lean", 400, protein=5),
        make_food("mid", 400, protein=20),
        make_food("rich", 400, protein=35),
    ]
    selection = MealSelectionFilter(target_calories=400, high_protein=True)

    assert [item.id for item in apply_filters(pool, selection)] == ["mid", "rich"]


def test_apply_filters_drops_slow_and_unparseable_prep_times() -> None:
    pool = [
        make_food("quick", 400, prep_time="15 minutes"),
        make_food("edge", 400, prep_time="30 min"),
        make_food("slow", 400, prep_time="45 minutes"),
        make_food("vague", 400, prep_time="overnight"),
    ]
    selection = MealSelectionFilter(target_calories=400, quick_only=True)

    assert [item.id for item in apply_filters(pool, selection)] == ["quick", "edge"]


def test_apply_filters_removes_excluded_ids_before_diet_filters() -> None:
    pool = [
        make_food("recent", 400),
        make_food("egg", 400, is_vegetarian=False, is_vegan=False),
        make_food("dal", 400),
    ]
    selection = MealSelectionFilter(
        target_calories=400,
        vegetarian_only=True,
        excluded_ids=frozenset({"recent"}),
    )

    assert [item.id for item in apply_filters(pool, selection)] == ["dal"]


def test_parse_prep_minutes() -> None:
    assert parse_prep_minutes("25 minutes") == 25
    assert parse_prep_minutes("  10") == 10
    assert parse_prep_minutes("about 20 minutes") is None
    assert parse_prep_minutes("") is None


def test_select_meal_measures_against_explicit_target() -> None:
    pool = [make_food("near", 210), make_food("stale", 990)]
    selection = MealSelectionFilter(target_calories=1000, tolerance=50)

    picks = {
        select_meal(pool, 200, selection, random.Random(seed)).id
        for seed in range(20)
    }

    assert picks == {"near"}
