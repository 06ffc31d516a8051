"""Supabase repository for user profiles."""

import asyncio
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from meal_plan_tracker.domain.progress import UserProfile
from meal_plan_tracker.services.profile import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation reading the ``users`` table."""

    client: Client

    async def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile for a user."""
        return await asyncio.to_thread(self._get_profile, user_id)

    def _get_profile(self, user_id: UUID) -> UserProfile | None:
        response = (
            self.client.table("users")
            .select(
                "id, weight, height, age, gender, goal, calories, proteins, "
                "daily_water_goal, created_at"
            )
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])


def _parse_profile(row: dict[str, object]) -> UserProfile:
    return UserProfile(
        user_id=UUID(str(row["id"])),
        weight_kg=_to_optional_float(row.get("weight")),
        height_cm=_to_optional_float(row.get("height")),
        created_at=_parse_date(row.get("created_at")),
        age=_to_optional_int(row.get("age")),
        gender=row.get("gender"),
        goal=row.get("goal"),
        calorie_goal=_to_optional_float(row.get("calories")),
        protein_goal=_to_optional_float(row.get("proteins")),
        water_goal=_to_optional_int(row.get("daily_water_goal")),
    )


def _to_optional_float(value: object) -> float | None:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _to_optional_int(value: object) -> int | None:
    number = _to_optional_float(value)
    return int(number) if number is not None else None


def _parse_date(value: object) -> date:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return date.min
