"""ASGI entrypoint for the meal plan tracker API."""

from meal_plan_tracker.api.app import create_app
from meal_plan_tracker.containers import build_container

app = create_app(build_container())
