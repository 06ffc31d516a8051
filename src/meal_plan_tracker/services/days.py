"""Date-keyed store of day aggregates for one user.

The store is the single source of truth for scheduled meals, consumption,
water and tasks. Synchronous reads are plain dictionary lookups over the loaded
days; dates outside the loaded range are read from the repository on first
access before anything is merged into them. Every mutation runs under
one lock, is persisted through the repository, and only then replaces the
in-memory aggregate, so a failed save leaves the store unchanged.

Consumed totals are recomputed from the consumed meals whenever the meal list
of a date changes. ``update_progress`` writes them directly instead (a manual
override); the override stands until the next meal change on that date, such
as a ``mark_consumed`` toggle, recomputes the totals from the meal list.
"""

import asyncio
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Protocol
from uuid import UUID, uuid4

from meal_plan_tracker.domain.catalog import MealSlot
from meal_plan_tracker.domain.days import DailyGoals, DailyTask, DayAggregate, MealItem
from meal_plan_tracker.domain.errors import (
    InvalidNumericInputError,
    MealNotFoundError,
    NoAggregateForDateError,
    TaskNotFoundError,
)
from meal_plan_tracker.domain.plans import DailyMealPlan

_logger = logging.getLogger(__name__)


class DayRepository(Protocol):
    """Persistence interface for day aggregates."""

    async def load(self, user_id: UUID, day: str) -> DayAggregate | None:
        """Return the stored aggregate for a date, if present."""

    async def save(self, user_id: UUID, day: str, aggregate: DayAggregate) -> None:
        """Persist the aggregate for a date."""

    async def list_days(
        self, user_id: UUID, start: str, end: str
    ) -> list[DayAggregate]:
        """Return stored aggregates with dates in ``[start, end]``."""


def coerce_number(value: object, field_name: str, *, strict: bool = False) -> float:
    """Return a finite float; invalid input becomes 0 or raises when strict."""
    number: float | None = None
    if isinstance(value, bool):
        number = None
    elif isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            number = None
    if number is None or not math.isfinite(number):
        if strict:
            raise InvalidNumericInputError(field_name, value)
        _logger.warning("Coercing invalid %s value %r to 0", field_name, value)
        return 0.0
    return number


def _with_totals(aggregate: DayAggregate, meals: tuple[MealItem, ...]) -> DayAggregate:
    consumed = [meal for meal in meals if meal.consumed]
    return replace(
        aggregate,
        meals=meals,
        total_calories=sum(meal.calories for meal in meals),
        total_protein=sum(meal.protein for meal in meals),
        consumed_calories=sum(meal.calories for meal in consumed),
        consumed_protein=sum(meal.protein for meal in consumed),
        manual_override=False,
    )


def _merge_meal(meals: tuple[MealItem, ...], item: MealItem) -> tuple[MealItem, ...]:
    for index, meal in enumerate(meals):
        if meal.id == item.id:
            merged = replace(item, consumed=meal.consumed)
            return meals[:index] + (merged,) + meals[index + 1 :]
    for index, meal in enumerate(meals):
        if meal.meal_type is item.meal_type and not meal.consumed:
            return meals[:index] + (item,) + meals[index + 1 :]
    return (*meals, item)


@dataclass
class DayStore:
    """In-memory day aggregates for a user, persisted through a repository."""

    user_id: UUID
    goals: DailyGoals
    repository: DayRepository
    today: Callable[[], date] = date.today
    _days: dict[str, DayAggregate] = field(default_factory=dict, repr=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def days(self) -> dict[str, DayAggregate]:
        """Snapshot of all loaded aggregates keyed by ISO date."""
        return dict(self._days)

    def today_key(self) -> str:
        return self.today().isoformat()

    def get_plan_for_date(self, day: str | date) -> DayAggregate | None:
        """Return the aggregate for a date without side effects."""
        key = day.isoformat() if isinstance(day, date) else day
        return self._days.get(key)

    def get_today_plan(self) -> DayAggregate | None:
        """Return today's aggregate, if one exists."""
        return self.get_plan_for_date(self.today_key())

    async def fetch_plan_for_date(self, day: str | date) -> DayAggregate | None:
        """Return the aggregate for a date, loading it from storage if needed."""
        key = day.isoformat() if isinstance(day, date) else day
        async with self._lock:
            return await self._load(key)

    async def require_plan_for_date(self, day: str | date) -> DayAggregate:
        """Return the aggregate for a date or raise ``NoAggregateForDateError``."""
        aggregate = await self.fetch_plan_for_date(day)
        if aggregate is None:
            key = day.isoformat() if isinstance(day, date) else day
            raise NoAggregateForDateError(key)
        return aggregate

    async def hydrate(self, start: date, end: date) -> int:
        """Load persisted aggregates for ``[start, end]`` into memory."""
        loaded = await self.repository.list_days(
            self.user_id, start.isoformat(), end.isoformat()
        )
        async with self._lock:
            for aggregate in loaded:
                self._days[aggregate.date] = aggregate
        return len(loaded)

    async def schedule_meal(
        self, item: MealItem, day: str, slot: MealSlot | str
    ) -> DayAggregate:
        """Add a meal to a date, replacing only an un-consumed meal in the same slot."""
        meal_type = slot if isinstance(slot, MealSlot) else MealSlot.parse(slot)
        scheduled = replace(item, meal_type=meal_type, scheduled_date=day)
        async with self._lock:
            current = await self._get_or_create(day)
            updated = _with_totals(current, _merge_meal(current.meals, scheduled))
            return await self._commit(updated)

    async def save_full_plan(self, day: str, plan: DailyMealPlan) -> DayAggregate:
        """Schedule every slot of a generated plan on a date."""
        async with self._lock:
            current = await self._get_or_create(day)
            meals = current.meals
            for slot in MealSlot:
                item = MealItem.from_food(plan.item_for(slot), slot, day)
                meals = _merge_meal(meals, item)
            return await self._commit(_with_totals(current, meals))

    async def add_custom_meal(self, item: MealItem, day: str) -> DayAggregate:
        """Record a manually entered meal that was already eaten."""
        consumed = replace(item, consumed=True, scheduled_date=day)
        async with self._lock:
            current = await self._get_or_create(day)
            updated = _with_totals(current, (*current.meals, consumed))
            return await self._commit(updated)

    async def mark_consumed(self, meal_id: str, consumed: bool) -> DayAggregate:
        """Set a meal's consumed flag and recompute that day's consumed totals."""
        async with self._lock:
            current = self._find_day_with_meal(meal_id)
            if current is None:
                raise MealNotFoundError(meal_id)
            meals = tuple(
                replace(meal, consumed=consumed) if meal.id == meal_id else meal
                for meal in current.meals
            )
            if current.manual_override:
                _logger.info(
                    "Recomputing totals for %s over a manual progress override",
                    current.date,
                )
            return await self._commit(_with_totals(current, meals))

    async def update_water_intake(self, glasses: int) -> DayAggregate:
        """Set today's water glasses, clamped to ``[0, goal]``."""
        async with self._lock:
            current = await self._get_or_create(self.today_key())
            requested = int(coerce_number(glasses, "water", strict=True))
            clamped = max(0, min(requested, current.goals.water))
            if clamped == current.water_glasses and current.date in self._days:
                return current
            return await self._commit(replace(current, water_glasses=clamped))

    async def add_task(self, text: str) -> DayAggregate:
        """Append a task to today's checklist."""
        async with self._lock:
            current = await self._get_or_create(self.today_key())
            task = DailyTask(id=str(uuid4()), text=text)
            return await self._commit(replace(current, tasks=(*current.tasks, task)))

    async def toggle_task(self, task_id: str) -> DayAggregate:
        """Flip the completion flag of one of today's tasks."""
        async with self._lock:
            current = await self._get_or_create(self.today_key())
            if not any(task.id == task_id for task in current.tasks):
                raise TaskNotFoundError(task_id)
            tasks = tuple(
                replace(task, completed=not task.completed)
                if task.id == task_id
                else task
                for task in current.tasks
            )
            return await self._commit(replace(current, tasks=tasks))

    async def update_progress(self, calories: object, protein: object) -> DayAggregate:
        """Overwrite today's consumed totals with manually logged values."""
        calories_value = max(0.0, coerce_number(calories, "calories"))
        protein_value = max(0.0, coerce_number(protein, "protein"))
        async with self._lock:
            current = await self._get_or_create(self.today_key())
            updated = replace(
                current,
                consumed_calories=calories_value,
                consumed_protein=protein_value,
                manual_override=True,
            )
            _logger.info(
                "Manual progress override for %s: calories=%s protein=%s",
                current.date,
                calories_value,
                protein_value,
            )
            return await self._commit(updated)

    async def _load(self, day: str) -> DayAggregate | None:
        existing = self._days.get(day)
        if existing is not None:
            return existing
        stored = await self.repository.load(self.user_id, day)
        if stored is not None:
            _logger.info("Loaded %s for %s from storage", day, self.user_id)
            self._days[day] = stored
        return stored

    async def _get_or_create(self, day: str) -> DayAggregate:
        existing = await self._load(day)
        if existing is not None:
            return existing
        return DayAggregate(date=day, goals=self.goals)

    def _find_day_with_meal(self, meal_id: str) -> DayAggregate | None:
        for aggregate in self._days.values():
            if aggregate.find_meal(meal_id) is not None:
                return aggregate
        return None

    async def _commit(self, aggregate: DayAggregate) -> DayAggregate:
        await self.repository.save(self.user_id, aggregate.date, aggregate)
        self._days[aggregate.date] = aggregate
        return aggregate
