"""Per-user day stores, created and hydrated on first access."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, timedelta
from uuid import UUID

from meal_plan_tracker.domain.errors import ProfileNotFoundError
from meal_plan_tracker.domain.progress import UserProfile
from meal_plan_tracker.services.days import DayRepository, DayStore
from meal_plan_tracker.services.profile import (
    GoalDefaults,
    ProfileRepository,
    resolve_goals,
)

FUTURE_DAYS = 14

_logger = logging.getLogger(__name__)


@dataclass
class TrackingService:
    """Registry of day stores keyed by user id."""

    day_repository: DayRepository
    profile_repository: ProfileRepository
    goal_defaults: GoalDefaults = field(default_factory=GoalDefaults)
    hydration_days: int = 60
    today: Callable[[], date] = date.today
    _stores: dict[UUID, DayStore] = field(default_factory=dict, repr=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def get_profile(self, user_id: UUID) -> UserProfile:
        """Return a user's profile or raise ``ProfileNotFoundError``."""
        profile = await self.profile_repository.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile

    async def store_for(self, user_id: UUID) -> DayStore:
        """Return the user's day store, loading recent days on first use."""
        async with self._lock:
            existing = self._stores.get(user_id)
            if existing is not None:
                return existing
            profile = await self.get_profile(user_id)
            store = DayStore(
                user_id=user_id,
                goals=resolve_goals(profile, self.goal_defaults),
                repository=self.day_repository,
                today=self.today,
            )
            now = self.today()
            loaded = await store.hydrate(
                now - timedelta(days=self.hydration_days),
                now + timedelta(days=FUTURE_DAYS),
            )
            _logger.info("Hydrated day store for %s with %s days", user_id, loaded)
            self._stores[user_id] = store
            return store

    def loaded_users(self) -> list[UUID]:
        """Return users whose stores are in memory."""
        return list(self._stores)
