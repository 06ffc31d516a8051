"""Profile-derived defaults: calorie estimate, goals and BMI."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from meal_plan_tracker.domain.days import DailyGoals
from meal_plan_tracker.domain.progress import UserProfile

DEFAULT_CALORIES = 2000.0
MODERATE_ACTIVITY_FACTOR = 1.55
WEIGHT_LOSS_DEFICIT = 500
WEIGHT_GAIN_SURPLUS = 300


class ProfileRepository(Protocol):
    """Read-only access to user profiles."""

    async def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile for a user, if present."""


@dataclass(frozen=True)
class GoalDefaults:
    """Fallback goals used when a profile does not set its own."""

    calories: float = DEFAULT_CALORIES
    protein: float = 150.0
    water: int = 8


def estimate_daily_calories(profile: UserProfile) -> float:
    """Estimate daily calories with Mifflin-St Jeor and a moderate activity level."""
    if not profile.weight_kg or not profile.height_cm or not profile.age:
        return DEFAULT_CALORIES
    bmr = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    if (profile.gender or "male").lower() == "male":
        bmr += 5
    else:
        bmr -= 161
    tdee = bmr * MODERATE_ACTIVITY_FACTOR

    goal = (profile.goal or "").lower()
    if "lose" in goal or "weight loss" in goal:
        return float(round(tdee - WEIGHT_LOSS_DEFICIT))
    if "gain" in goal or "muscle" in goal:
        return float(round(tdee + WEIGHT_GAIN_SURPLUS))
    return float(round(tdee))


def resolve_goals(
    profile: UserProfile | None, defaults: GoalDefaults | None = None
) -> DailyGoals:
    """Return daily goals from the profile, falling back to defaults."""
    defaults = defaults or GoalDefaults()
    if profile is None:
        return DailyGoals(
            calories=defaults.calories, protein=defaults.protein, water=defaults.water
        )
    calories = profile.calorie_goal
    if not calories:
        calories = (
            estimate_daily_calories(profile)
            if profile.weight_kg and profile.height_cm and profile.age
            else defaults.calories
        )
    return DailyGoals(
        calories=calories,
        protein=profile.protein_goal or defaults.protein,
        water=profile.water_goal or defaults.water,
    )


def calculate_bmi(weight_kg: float, height_cm: float | None) -> float | None:
    """Return weight / height_m^2, or None without a usable height."""
    if not height_cm or height_cm <= 0:
        return None
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)
