"""Supabase repository for day aggregates."""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from meal_plan_tracker.domain.catalog import MealSlot
from meal_plan_tracker.domain.days import DailyGoals, DailyTask, DayAggregate, MealItem
from meal_plan_tracker.services.days import DayRepository


@dataclass
class SupabaseDayRepository(DayRepository):
    """Supabase implementation storing one JSON document per user and date."""

    client: Client

    async def load(self, user_id: UUID, day: str) -> DayAggregate | None:
        """Return the stored aggregate for a date."""
        return await asyncio.to_thread(self._load, user_id, day)

    async def save(self, user_id: UUID, day: str, aggregate: DayAggregate) -> None:
        """Upsert the aggregate for a date."""
        await asyncio.to_thread(self._save, user_id, day, aggregate)

    async def list_days(
        self, user_id: UUID, start: str, end: str
    ) -> list[DayAggregate]:
        """Return aggregates in the inclusive date range, oldest first."""
        return await asyncio.to_thread(self._list_days, user_id, start, end)

    def _load(self, user_id: UUID, day: str) -> DayAggregate | None:
        response = (
            self.client.table("daily_plans")
            .select("plan_date, plan_json")
            .eq("user_id", str(user_id))
            .eq("plan_date", day)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_day(response.data[0])

    def _save(self, user_id: UUID, day: str, aggregate: DayAggregate) -> None:
        self.client.table("daily_plans").upsert(
            {
                "user_id": str(user_id),
                "plan_date": day,
                "plan_json": _serialize_day(aggregate),
                "total_calories": aggregate.total_calories,
                "consumed_calories": aggregate.consumed_calories,
                "consumed_protein": aggregate.consumed_protein,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id,plan_date",
        ).execute()

    def _list_days(self, user_id: UUID, start: str, end: str) -> list[DayAggregate]:
        response = (
            self.client.table("daily_plans")
            .select("plan_date, plan_json")
            .eq("user_id", str(user_id))
            .gte("plan_date", start)
            .lte("plan_date", end)
            .order("plan_date", desc=False)
            .execute()
        )
        return [_parse_day(row) for row in response.data or []]


def _serialize_day(aggregate: DayAggregate) -> dict[str, object]:
    return {
        "id": aggregate.id,
        "date": aggregate.date,
        "meals": [
            {
                "id": meal.id,
                "name": meal.name,
                "name_bn": meal.name_bn,
                "meal_type": meal.meal_type.value,
                "calories": meal.calories,
                "protein": meal.protein,
                "carbs": meal.carbs,
                "fat": meal.fat,
                "consumed": meal.consumed,
                "food_id": meal.food_id,
                "scheduled_date": meal.scheduled_date,
            }
            for meal in aggregate.meals
        ],
        "tasks": [
            {"id": task.id, "text": task.text, "completed": task.completed}
            for task in aggregate.tasks
        ],
        "goals": {
            "calories": aggregate.goals.calories,
            "protein": aggregate.goals.protein,
            "water": aggregate.goals.water,
        },
        "water_glasses": aggregate.water_glasses,
        "total_calories": aggregate.total_calories,
        "total_protein": aggregate.total_protein,
        "consumed_calories": aggregate.consumed_calories,
        "consumed_protein": aggregate.consumed_protein,
        "manual_override": aggregate.manual_override,
    }


def _parse_day(row: dict[str, object]) -> DayAggregate:
    payload = row.get("plan_json") or {}
    day = str(row.get("plan_date") or payload.get("date", ""))
    if "T" in day:
        day = day.split("T", 1)[0]
    goals = payload.get("goals") or {}
    return DayAggregate(
        id=str(payload.get("id") or day),
        date=day,
        goals=DailyGoals(
            calories=float(goals.get("calories", 0.0)),
            protein=float(goals.get("protein", 0.0)),
            water=int(goals.get("water", 0)),
        ),
        meals=tuple(_parse_meal(meal, day) for meal in payload.get("meals") or []),
        tasks=tuple(
            DailyTask(
                id=str(task["id"]),
                text=str(task.get("text", "")),
                completed=bool(task.get("completed", False)),
            )
            for task in payload.get("tasks") or []
        ),
        water_glasses=int(payload.get("water_glasses", 0)),
        total_calories=float(payload.get("total_calories", 0.0)),
        total_protein=float(payload.get("total_protein", 0.0)),
        consumed_calories=float(payload.get("consumed_calories", 0.0)),
        consumed_protein=float(payload.get("consumed_protein", 0.0)),
        manual_override=bool(payload.get("manual_override", False)),
    )


def _parse_meal(meal: dict[str, object], day: str) -> MealItem:
    return MealItem(
        id=str(meal["id"]),
        name=str(meal.get("name") or meal.get("recipeName") or "Unnamed Meal"),
        name_bn=meal.get("name_bn"),
        meal_type=MealSlot.parse(str(meal.get("meal_type") or "snack")),
        calories=float(meal.get("calories") or 0.0),
        protein=float(meal.get("protein") or 0.0),
        carbs=float(meal.get("carbs") or 0.0),
        fat=float(meal.get("fat") or 0.0),
        consumed=bool(meal.get("consumed", False)),
        food_id=meal.get("food_id"),
        scheduled_date=meal.get("scheduled_date") or day,
    )
