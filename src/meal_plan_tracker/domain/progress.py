"""Domain models for profiles and progress reporting."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class UserProfile:
    """Read-only view of the profile fields the tracker relies on."""

    user_id: UUID
    weight_kg: float | None
    height_cm: float | None
    created_at: date
    age: int | None = None
    gender: str | None = None
    goal: str | None = None
    calorie_goal: float | None = None
    protein_goal: float | None = None
    water_goal: int | None = None


@dataclass(frozen=True)
class WeightLogEntry:
    """A weight measurement logged by the user."""

    day: date
    weight_kg: float
    bmi: float | None = None
    notes: str | None = None


@dataclass(frozen=True)
class TrendPoint:
    """One point of the weight/BMI trend series."""

    day: date
    weight_kg: float
    bmi: float | None
    is_anchor: bool = False


@dataclass(frozen=True)
class DailyProgress:
    """Consumed totals for one day of a reporting period."""

    day: date
    consumed_calories: float
    consumed_protein: float
    water_glasses: int
    tracked: bool


@dataclass(frozen=True)
class PeriodSummary:
    """Per-day totals and averages for a reporting period."""

    start: date
    end: date
    daily: list[DailyProgress]
    avg_calories: float
    avg_protein: float
    days_tracked: int


@dataclass(frozen=True)
class GoalCounts:
    """Number of days each goal was met (at least 90% of target)."""

    calories: int
    protein: int
    water: int
    days: int


@dataclass(frozen=True)
class ProgressReport:
    """Headline numbers for the progress report screen."""

    avg_calories: float
    days_tracked: int
    active_days_last_week: int
    estimated_weight_change_kg: float
    streak: int
    goals: GoalCounts
