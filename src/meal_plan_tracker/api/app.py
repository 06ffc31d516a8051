"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict, replace
from datetime import date
from uuid import UUID, uuid4

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from meal_plan_tracker.api.admin import router as admin_router
from meal_plan_tracker.api.models import (
    ConsumedPayload,
    MealPayload,
    PlanOptionsPayload,
    PlanSlotsPayload,
    ProgressPayload,
    RegenerateRequest,
    TaskPayload,
    ValidateRequest,
    WaterPayload,
    WeightPayload,
)
from meal_plan_tracker.app_logging import configure_logging
from meal_plan_tracker.containers import AppContainer
from meal_plan_tracker.domain.catalog import MealSlot
from meal_plan_tracker.domain.days import MealItem
from meal_plan_tracker.domain.errors import (
    CatalogEmptyError,
    InvalidNumericInputError,
    MealNotFoundError,
    MealPlanError,
    NoAggregateForDateError,
    ProfileNotFoundError,
    TaskNotFoundError,
)
from meal_plan_tracker.domain.plans import DailyMealPlan
from meal_plan_tracker.services.catalog import StaticFoodCatalog
from meal_plan_tracker.services.planner import recent_meal_ids

_UNPROCESSABLE = 422

_ERROR_STATUS: dict[type[MealPlanError], int] = {
    MealNotFoundError: status.HTTP_404_NOT_FOUND,
    TaskNotFoundError: status.HTTP_404_NOT_FOUND,
    NoAggregateForDateError: status.HTTP_404_NOT_FOUND,
    ProfileNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidNumericInputError: _UNPROCESSABLE,
    CatalogEmptyError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        catalog: StaticFoodCatalog = app.state.container.catalog
        logger.info("Serving catalog with %s foods", len(catalog.all_foods()))
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(MealPlanError)
    async def meal_plan_error_handler(
        request: Request, exc: MealPlanError
    ) -> JSONResponse:
        status_code = _ERROR_STATUS.get(
            type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Request to %s failed: %s", request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/plans/generate")
    async def generate_plan(
        request: Request, payload: PlanOptionsPayload | None = None
    ) -> dict[str, object]:
        """Generate a plan for today without saving it."""
        state_container: AppContainer = request.app.state.container
        options = (payload or PlanOptionsPayload()).to_options()
        plan = state_container.meal_plan_service.generate_plan(options)
        validation = state_container.meal_plan_service.validate_plan(
            plan, options.target_calories
        )
        return {"plan": asdict(plan), "validation": asdict(validation)}

    @app.post("/plans/regenerate")
    async def regenerate_plan(
        payload: RegenerateRequest, request: Request
    ) -> dict[str, object]:
        """Reselect one slot, keeping the other three."""
        state_container: AppContainer = request.app.state.container
        plan = _resolve_plan(
            state_container.catalog,
            payload.plan,
            state_container.meal_plan_service.today(),
        )
        slot = _parse_slot(payload.slot)
        updated = state_container.meal_plan_service.regenerate_slot(
            plan, slot, payload.options.to_options()
        )
        return {"plan": asdict(updated)}

    @app.post("/plans/validate")
    async def validate_plan(
        payload: ValidateRequest, request: Request
    ) -> dict[str, object]:
        """Return advisory warnings for a plan."""
        state_container: AppContainer = request.app.state.container
        plan = _resolve_plan(
            state_container.catalog,
            payload.plan,
            state_container.meal_plan_service.today(),
        )
        validation = state_container.meal_plan_service.validate_plan(
            plan, payload.target_calories
        )
        return asdict(validation)

    @app.get("/catalog/search")
    async def search_catalog(q: str, request: Request) -> dict[str, object]:
        """Search foods by English or Bangla name."""
        state_container: AppContainer = request.app.state.container
        return {"foods": [asdict(food) for food in state_container.catalog.search(q)]}

    @app.get("/catalog/{slot}")
    async def list_catalog(slot: str, request: Request) -> dict[str, object]:
        """Return the catalog items for a slot."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.catalog.get_foods_by_meal_type(_parse_slot(slot))
        return {"foods": [asdict(food) for food in foods]}

    @app.get("/users/{user_id}/days/today")
    async def get_today(user_id: UUID, request: Request) -> dict[str, object]:
        """Return today's aggregate, or null when nothing was logged yet."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        aggregate = store.get_today_plan()
        return {"day": asdict(aggregate) if aggregate else None}

    @app.get("/users/{user_id}/days/{day}")
    async def get_day(user_id: UUID, day: date, request: Request) -> dict[str, object]:
        """Return the aggregate for a date."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        return {"day": asdict(await store.require_plan_for_date(day))}

    @app.post("/users/{user_id}/days/{day}/meals")
    async def schedule_meal(
        user_id: UUID, day: date, payload: MealPayload, request: Request
    ) -> dict[str, object]:
        """Schedule a catalog item, or record a custom meal as eaten."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        slot = _parse_slot(payload.slot)
        key = day.isoformat()
        if payload.food_id is None:
            item = MealItem(
                id=payload.meal_id or str(uuid4()),
                name=payload.name or "",
                name_bn=payload.name_bn,
                meal_type=slot,
                calories=payload.calories or 0.0,
                protein=payload.protein,
                carbs=payload.carbs,
                fat=payload.fat,
            )
            aggregate = await store.add_custom_meal(item, key)
        else:
            food = state_container.catalog.get_by_id(payload.food_id)
            if food is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Unknown food {payload.food_id}",
                )
            item = MealItem.from_food(food, slot, key)
            if payload.meal_id:
                item = replace(item, id=payload.meal_id)
            aggregate = await store.schedule_meal(item, key, slot)
        return {"day": asdict(aggregate)}

    @app.post("/users/{user_id}/days/{day}/plan")
    async def plan_day(
        user_id: UUID,
        day: date,
        request: Request,
        payload: PlanOptionsPayload | None = None,
    ) -> dict[str, object]:
        """Generate a plan avoiding recent meals and schedule it on a date."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        options = (payload or PlanOptionsPayload()).to_options(
            default_calories=store.goals.calories,
            extra_avoid=recent_meal_ids(store.days.values()),
        )
        plan = replace(
            state_container.meal_plan_service.generate_plan(options),
            date=day.isoformat(),
        )
        aggregate = await store.save_full_plan(day.isoformat(), plan)
        return {"plan": asdict(plan), "day": asdict(aggregate)}

    @app.post("/users/{user_id}/meals/{meal_id}/consumed")
    async def mark_consumed(
        user_id: UUID, meal_id: str, payload: ConsumedPayload, request: Request
    ) -> dict[str, object]:
        """Set the consumed flag of a scheduled meal."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        aggregate = await store.mark_consumed(meal_id, payload.consumed)
        return {"day": asdict(aggregate)}

    @app.put("/users/{user_id}/water")
    async def update_water(
        user_id: UUID, payload: WaterPayload, request: Request
    ) -> dict[str, object]:
        """Set today's water glasses."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        aggregate = await store.update_water_intake(payload.glasses)
        return {"day": asdict(aggregate)}

    @app.post("/users/{user_id}/tasks")
    async def add_task(
        user_id: UUID, payload: TaskPayload, request: Request
    ) -> dict[str, object]:
        """Add a task to today's checklist."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        aggregate = await store.add_task(payload.text)
        return {"day": asdict(aggregate)}

    @app.post("/users/{user_id}/tasks/{task_id}/toggle")
    async def toggle_task(
        user_id: UUID, task_id: str, request: Request
    ) -> dict[str, object]:
        """Flip the completion flag of one of today's tasks."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        aggregate = await store.toggle_task(task_id)
        return {"day": asdict(aggregate)}

    @app.put("/users/{user_id}/progress")
    async def update_progress(
        user_id: UUID, payload: ProgressPayload, request: Request
    ) -> dict[str, object]:
        """Overwrite today's consumed totals."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        aggregate = await store.update_progress(payload.calories, payload.protein)
        return {"day": asdict(aggregate)}

    @app.get("/users/{user_id}/report")
    async def report(user_id: UUID, request: Request) -> dict[str, object]:
        """Return the 30-day progress report."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        summary = state_container.progress_service.build_report(
            store.days.values(), store.goals.calories
        )
        return asdict(summary)

    @app.get("/users/{user_id}/week")
    async def week(user_id: UUID, request: Request) -> dict[str, object]:
        """Return week-to-date totals."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        return asdict(state_container.progress_service.get_week(store.days.values()))

    @app.get("/users/{user_id}/month")
    async def month(user_id: UUID, request: Request) -> dict[str, object]:
        """Return totals for the current month."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        return asdict(state_container.progress_service.get_month(store.days.values()))

    @app.get("/users/{user_id}/streak")
    async def get_streak(user_id: UUID, request: Request) -> dict[str, int]:
        """Return the current activity streak."""
        state_container: AppContainer = request.app.state.container
        store = await state_container.tracking_service.store_for(user_id)
        return {
            "streak": state_container.progress_service.get_streak(store.days.values())
        }

    @app.get("/users/{user_id}/bmi-trend")
    async def get_bmi_trend(user_id: UUID, request: Request) -> dict[str, object]:
        """Return the anchored weight/BMI trend."""
        state_container: AppContainer = request.app.state.container
        profile = await state_container.tracking_service.get_profile(user_id)
        points = await state_container.progress_service.get_bmi_trend(profile)
        return {"points": [asdict(point) for point in points]}

    @app.post("/users/{user_id}/weight")
    async def log_weight(
        user_id: UUID, payload: WeightPayload, request: Request
    ) -> dict[str, object]:
        """Record a weight measurement."""
        state_container: AppContainer = request.app.state.container
        profile = await state_container.tracking_service.get_profile(user_id)
        entry = await state_container.progress_service.log_weight(
            profile, payload.weight_kg, payload.day, payload.notes
        )
        return {"entry": asdict(entry)}

    return app


def _parse_slot(raw: str) -> MealSlot:
    try:
        return MealSlot.parse(raw)
    except ValueError as exc:
        raise HTTPException(
            status_code=_UNPROCESSABLE,
            detail=f"Unknown meal slot {raw!r}",
        ) from exc


def _resolve_plan(
    catalog: StaticFoodCatalog, payload: PlanSlotsPayload, today: date
) -> DailyMealPlan:
    items = {}
    for slot in MealSlot:
        food_id = getattr(payload, slot.value)
        food = catalog.get_by_id(food_id)
        if food is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown food {food_id}",
            )
        items[slot.value] = food
    plan_date = payload.date or today
    return DailyMealPlan(date=plan_date.isoformat(), **items)
