"""Shared test fixtures."""

import random
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

import pytest

from meal_plan_tracker.config import Settings
from meal_plan_tracker.containers import AppContainer
from meal_plan_tracker.domain.catalog import FoodItem, MealSlot
from meal_plan_tracker.domain.days import DailyGoals, DayAggregate
from meal_plan_tracker.domain.progress import UserProfile, WeightLogEntry
from meal_plan_tracker.services.catalog import StaticFoodCatalog
from meal_plan_tracker.services.days import DayRepository, DayStore
from meal_plan_tracker.services.planner import MealPlanService
from meal_plan_tracker.services.profile import ProfileRepository
from meal_plan_tracker.services.progress import ProgressService, WeightLogRepository
from meal_plan_tracker.services.tracking import TrackingService

TODAY = date(2025, 3, 12)
USER_ID = UUID("6f1c2d3e-4a5b-4c6d-8e9f-0a1b2c3d4e5f")
GOALS = DailyGoals(calories=2000.0, protein=150.0, water=8)


def fixed_today() -> date:
    return TODAY


def make_food(  # noqa: PLR0913
    food_id: str,
    calories: float,
    *,
    slot: MealSlot = MealSlot.LUNCH,
    protein: float = 10.0,
    carbs: float = 50.0,
    fat: float = 10.0,
    prep_time: str = "20 minutes",
    is_vegetarian: bool = True,
    is_vegan: bool = True,
) -> FoodItem:
    return FoodItem(
        id=food_id,
        name=f"Food {food_id}",
        name_bn=f"খাবার {food_id}",
        slot=slot,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=2.0,
        prep_time=prep_time,
        is_vegetarian=is_vegetarian,
        is_vegan=is_vegan,
    )


@dataclass
class InMemoryDayRepository(DayRepository):
    """In-memory day repository for tests."""

    days: dict[tuple[UUID, str], DayAggregate] = field(default_factory=dict)
    saves: list[tuple[UUID, str]] = field(default_factory=list)
    fail_saves: bool = False

    async def load(self, user_id: UUID, day: str) -> DayAggregate | None:
        return self.days.get((user_id, day))

    async def save(self, user_id: UUID, day: str, aggregate: DayAggregate) -> None:
        if self.fail_saves:
            raise RuntimeError("storage unavailable")
        self.days[(user_id, day)] = aggregate
        self.saves.append((user_id, day))

    async def list_days(
        self, user_id: UUID, start: str, end: str
    ) -> list[DayAggregate]:
        return sorted(
            (
                aggregate
                for (owner, day), aggregate in self.days.items()
                if owner == user_id and start <= day <= end
            ),
            key=lambda aggregate: aggregate.date,
        )


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)

    async def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)


@dataclass
class InMemoryWeightLogRepository(WeightLogRepository):
    """In-memory weight log repository for tests."""

    logs: dict[UUID, dict[date, WeightLogEntry]] = field(default_factory=dict)

    async def list_weight_logs(self, user_id: UUID) -> list[WeightLogEntry]:
        entries = self.logs.get(user_id, {})
        return [entries[day] for day in sorted(entries)]

    async def upsert_weight_log(self, user_id: UUID, entry: WeightLogEntry) -> None:
        self.logs.setdefault(user_id, {})[entry.day] = entry


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
    )


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(
        user_id=USER_ID,
        weight_kg=70.0,
        height_cm=175.0,
        created_at=date(2025, 1, 1),
        age=30,
        gender="male",
        goal="maintain",
        calorie_goal=2000.0,
        protein_goal=150.0,
        water_goal=8,
    )


@pytest.fixture
def catalog() -> StaticFoodCatalog:
    return StaticFoodCatalog.load()


@pytest.fixture
def day_repository() -> InMemoryDayRepository:
    return InMemoryDayRepository()


@pytest.fixture
def profile_repository(profile: UserProfile) -> InMemoryProfileRepository:
    return InMemoryProfileRepository(profiles={profile.user_id: profile})


@pytest.fixture
def weight_log_repository() -> InMemoryWeightLogRepository:
    return InMemoryWeightLogRepository()


@pytest.fixture
def day_store(day_repository: InMemoryDayRepository) -> DayStore:
    return DayStore(
        user_id=USER_ID,
        goals=GOALS,
        repository=day_repository,
        today=fixed_today,
    )


@pytest.fixture
def container(
    settings: Settings,
    catalog: StaticFoodCatalog,
    day_repository: InMemoryDayRepository,
    profile_repository: InMemoryProfileRepository,
    weight_log_repository: InMemoryWeightLogRepository,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        catalog=catalog,
        meal_plan_service=MealPlanService(
            catalog=catalog, rng=random.Random(7), today=fixed_today
        ),
        tracking_service=TrackingService(
            day_repository=day_repository,
            profile_repository=profile_repository,
            today=fixed_today,
        ),
        progress_service=ProgressService(weight_log_repository, today=fixed_today),
    )
