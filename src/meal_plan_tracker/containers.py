"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from meal_plan_tracker.adapters.supabase_day_repository import SupabaseDayRepository
from meal_plan_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from meal_plan_tracker.adapters.supabase_weight_log_repository import (
    SupabaseWeightLogRepository,
)
from meal_plan_tracker.config import Settings
from meal_plan_tracker.services.catalog import StaticFoodCatalog
from meal_plan_tracker.services.planner import MealPlanService
from meal_plan_tracker.services.profile import GoalDefaults
from meal_plan_tracker.services.progress import ProgressService
from meal_plan_tracker.services.tracking import TrackingService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog: StaticFoodCatalog
    meal_plan_service: MealPlanService
    tracking_service: TrackingService
    progress_service: ProgressService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    day_repository = SupabaseDayRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    weight_log_repository = SupabaseWeightLogRepository(supabase_client)
    catalog = StaticFoodCatalog.load(resolved_settings.catalog_path)
    meal_plan_service = MealPlanService(
        catalog=catalog,
        meal_tolerance=resolved_settings.meal_tolerance,
        snack_tolerance=resolved_settings.snack_tolerance,
        regeneration_tolerance=resolved_settings.regeneration_tolerance,
    )
    tracking_service = TrackingService(
        day_repository=day_repository,
        profile_repository=profile_repository,
        goal_defaults=GoalDefaults(
            calories=resolved_settings.default_calorie_goal,
            protein=resolved_settings.default_protein_goal,
            water=resolved_settings.default_water_goal,
        ),
        hydration_days=resolved_settings.hydration_days,
    )
    progress_service = ProgressService(weight_log_repository)

    return AppContainer(
        settings=resolved_settings,
        catalog=catalog,
        meal_plan_service=meal_plan_service,
        tracking_service=tracking_service,
        progress_service=progress_service,
    )
