"""Read-only progress views over day aggregates and weight logs."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from meal_plan_tracker.domain.days import DayAggregate
from meal_plan_tracker.domain.progress import (
    DailyProgress,
    GoalCounts,
    PeriodSummary,
    ProgressReport,
    TrendPoint,
    UserProfile,
    WeightLogEntry,
)
from meal_plan_tracker.services.profile import calculate_bmi

DECEMBER = 12
GOAL_MET_RATIO = 0.9
CALORIES_PER_KG = 7700
REPORT_WINDOW_DAYS = 30
WEEK_DAYS = 7


class WeightLogRepository(Protocol):
    """Persistence interface for weight logs."""

    async def list_weight_logs(self, user_id: UUID) -> list[WeightLogEntry]:
        """Return every weight log for a user."""

    async def upsert_weight_log(self, user_id: UUID, entry: WeightLogEntry) -> None:
        """Insert or replace the weight log for ``entry.day``."""


def slice_days(
    days: Iterable[DayAggregate], start: date, end: date
) -> list[DayAggregate]:
    """Return aggregates dated within ``[start, end]``, oldest first."""
    lower, upper = start.isoformat(), end.isoformat()
    return sorted(
        (day for day in days if lower <= day.date <= upper),
        key=lambda day: day.date,
    )


def bmi_trend(profile: UserProfile, logs: Iterable[WeightLogEntry]) -> list[TrendPoint]:
    """Return the weight/BMI series anchored on the profile's starting weight.

    The first point is always the weight declared at account creation. Logged
    weights follow in date order and never replace the anchor, even when a log
    shares its date.
    """
    points: list[TrendPoint] = []
    if profile.weight_kg:
        points.append(
            TrendPoint(
                day=profile.created_at,
                weight_kg=profile.weight_kg,
                bmi=calculate_bmi(profile.weight_kg, profile.height_cm),
                is_anchor=True,
            )
        )
    for entry in sorted(logs, key=lambda log: log.day):
        points.append(
            TrendPoint(
                day=entry.day,
                weight_kg=entry.weight_kg,
                bmi=calculate_bmi(entry.weight_kg, profile.height_cm),
            )
        )
    return points


def streak(days: Iterable[DayAggregate], today: date) -> int:
    """Count consecutive days with logged activity, walking back from today."""
    by_date = {day.date: day for day in days}
    count = 0
    cursor = today
    while True:
        aggregate = by_date.get(cursor.isoformat())
        if aggregate is None or not aggregate.has_activity:
            return count
        count += 1
        cursor -= timedelta(days=1)


def goal_counts(days: Iterable[DayAggregate]) -> GoalCounts:
    """Count days reaching at least 90% of each goal."""
    calories = protein = water = total = 0
    for day in days:
        total += 1
        if _met(day.consumed_calories, day.goals.calories):
            calories += 1
        if _met(day.consumed_protein, day.goals.protein):
            protein += 1
        if _met(day.water_glasses, day.goals.water):
            water += 1
    return GoalCounts(calories=calories, protein=protein, water=water, days=total)


def summarize_period(
    days: Iterable[DayAggregate], start: date, length: int
) -> PeriodSummary:
    """Return one entry per calendar day and averages over the whole period."""
    by_date = {day.date: day for day in days}
    daily: list[DailyProgress] = []
    for offset in range(length):
        current = start + timedelta(days=offset)
        aggregate = by_date.get(current.isoformat())
        if aggregate is None:
            daily.append(
                DailyProgress(
                    day=current,
                    consumed_calories=0.0,
                    consumed_protein=0.0,
                    water_glasses=0,
                    tracked=False,
                )
            )
            continue
        daily.append(
            DailyProgress(
                day=current,
                consumed_calories=aggregate.consumed_calories,
                consumed_protein=aggregate.consumed_protein,
                water_glasses=aggregate.water_glasses,
                tracked=aggregate.consumed_calories > 0,
            )
        )

    total_days = max(len(daily), 1)
    return PeriodSummary(
        start=start,
        end=start + timedelta(days=max(length - 1, 0)),
        daily=daily,
        avg_calories=sum(entry.consumed_calories for entry in daily) / total_days,
        avg_protein=sum(entry.consumed_protein for entry in daily) / total_days,
        days_tracked=sum(1 for entry in daily if entry.tracked),
    )


def _met(value: float, goal: float) -> bool:
    if goal <= 0:
        return False
    return value >= goal * GOAL_MET_RATIO


@dataclass
class ProgressService:
    """Reporting over a user's day aggregates and weight history."""

    weight_log_repository: WeightLogRepository
    today: Callable[[], date] = date.today

    def get_week(self, days: Iterable[DayAggregate]) -> PeriodSummary:
        """Return week-to-date totals, weeks starting on Monday."""
        now = self.today()
        start = now - timedelta(days=now.weekday())
        return summarize_period(days, start, WEEK_DAYS)

    def get_month(self, days: Iterable[DayAggregate]) -> PeriodSummary:
        """Return totals for the current calendar month."""
        now = self.today()
        start = now.replace(day=1)
        if start.month == DECEMBER:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)
        return summarize_period(days, start, (end - start).days)

    def get_streak(self, days: Iterable[DayAggregate]) -> int:
        return streak(days, self.today())

    def build_report(
        self, days: Iterable[DayAggregate], calorie_goal: float
    ) -> ProgressReport:
        """Return averages over the last 30 days and a weight change estimate.

        The estimate treats every 7700 kcal above the goal as one kilogram
        gained, so a calorie deficit yields a negative change.
        """
        now = self.today()
        all_days = list(days)
        recent = slice_days(
            all_days, now - timedelta(days=REPORT_WINDOW_DAYS - 1), now
        )
        tracked = [day for day in recent if day.consumed_calories > 0]
        avg_calories = (
            sum(day.consumed_calories for day in tracked) / len(tracked)
            if tracked
            else 0.0
        )
        last_week = slice_days(all_days, now - timedelta(days=WEEK_DAYS - 1), now)
        active_days = sum(
            1 for day in last_week if any(meal.consumed for meal in day.meals)
        )
        weight_change = (
            (avg_calories - calorie_goal) * len(tracked) / CALORIES_PER_KG
            if tracked
            else 0.0
        )
        return ProgressReport(
            avg_calories=round(avg_calories, 1),
            days_tracked=len(tracked),
            active_days_last_week=active_days,
            estimated_weight_change_kg=round(weight_change, 1),
            streak=streak(all_days, now),
            goals=goal_counts(recent),
        )

    async def get_bmi_trend(self, profile: UserProfile) -> list[TrendPoint]:
        """Return the anchored weight/BMI trend for a profile."""
        logs = await self.weight_log_repository.list_weight_logs(profile.user_id)
        return bmi_trend(profile, logs)

    async def log_weight(
        self,
        profile: UserProfile,
        weight_kg: float,
        day: date | None = None,
        notes: str | None = None,
    ) -> WeightLogEntry:
        """Record a weight for a day, computing BMI from the profile height."""
        entry = WeightLogEntry(
            day=day or self.today(),
            weight_kg=weight_kg,
            bmi=calculate_bmi(weight_kg, profile.height_cm),
            notes=notes,
        )
        await self.weight_log_repository.upsert_weight_log(profile.user_id, entry)
        return entry
