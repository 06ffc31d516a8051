"""Tests for the HTTP API."""

from fastapi.testclient import TestClient

from meal_plan_tracker.api.app import create_app
from meal_plan_tracker.domain.days import DayAggregate
from meal_plan_tracker.services.catalog import StaticFoodCatalog
from tests.conftest import GOALS, USER_ID

USER_PATH = f"/users/{USER_ID}"
PLAN_IDS = {
    "breakfast": "bf-ruti-dal",
    "lunch": "ln-bhat-rui",
    "dinner": "dn-ruti-shobji",
    "snack": "sn-peyara",
}


def _schedule_lunch(client: TestClient) -> dict[str, object]:
    response = client.post(
        f"{USER_PATH}/days/2025-03-12/meals",
        json={"slot": "lunch", "food_id": "ln-bhat-rui"},
    )
    assert response.status_code == 200
    return response.json()["day"]


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_generate_plan_returns_totals_and_validation(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/plans/generate", json={"target_calories": 2000})

    assert response.status_code == 200
    data = response.json()
    plan = data["plan"]
    slots = [plan[name] for name in ("breakfast", "lunch", "dinner", "snack")]
    assert plan["total_calories"] == sum(item["calories"] for item in slots)
    assert plan["date"] == "2025-03-12"
    assert isinstance(data["validation"]["warnings"], list)


def test_generate_plan_without_body_uses_defaults(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/plans/generate")

    assert response.status_code == 200
    assert response.json()["plan"]["snack"]["slot"] == "snack"


def test_generate_plan_rejects_invalid_target(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/plans/generate", json={"target_calories": -10})

    assert response.status_code == 422


def test_generate_plan_with_empty_catalog_is_server_error(container) -> None:
    container.meal_plan_service.catalog = StaticFoodCatalog()
    client = TestClient(create_app(container))

    response = client.post("/plans/generate", json={})

    assert response.status_code == 500
    assert "breakfast" in response.json()["detail"]


def test_regenerate_keeps_other_slots(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/plans/regenerate",
        json={"plan": PLAN_IDS, "slot": "lunch", "options": {"vegan_only": True}},
    )

    assert response.status_code == 200
    plan = response.json()["plan"]
    assert plan["breakfast"]["id"] == "bf-ruti-dal"
    assert plan["dinner"]["id"] == "dn-ruti-shobji"
    assert plan["snack"]["id"] == "sn-peyara"
    assert plan["lunch"]["is_vegan"]


def test_regenerate_rejects_unknown_slot_and_food(container) -> None:
    client = TestClient(create_app(container))

    bad_slot = client.post(
        "/plans/regenerate", json={"plan": PLAN_IDS, "slot": "brunch"}
    )
    bad_food = client.post(
        "/plans/regenerate",
        json={"plan": {**PLAN_IDS, "lunch": "missing"}, "slot": "lunch"},
    )

    assert bad_slot.status_code == 422
    assert bad_food.status_code == 404


def test_validate_plan(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/plans/validate", json={"plan": PLAN_IDS, "target_calories": 2000}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is (not data["warnings"])


def test_catalog_endpoints(container) -> None:
    client = TestClient(create_app(container))

    snacks = client.get("/catalog/snacks")
    search = client.get("/catalog/search", params={"q": "ilish"})
    unknown = client.get("/catalog/brunch")

    assert snacks.status_code == 200
    assert {food["slot"] for food in snacks.json()["foods"]} == {"snack"}
    assert [food["id"] for food in search.json()["foods"]] == ["ln-ilish-bhapa"]
    assert unknown.status_code == 422


def test_day_lifecycle(container) -> None:
    client = TestClient(create_app(container))

    assert client.get(f"{USER_PATH}/days/today").json() == {"day": None}

    day = _schedule_lunch(client)
    meal_id = day["meals"][0]["id"]
    assert day["total_calories"] == 680
    assert day["consumed_calories"] == 0

    consumed = client.post(
        f"{USER_PATH}/meals/{meal_id}/consumed", json={"consumed": True}
    )
    assert consumed.json()["day"]["consumed_calories"] == 680

    repeated = client.post(
        f"{USER_PATH}/meals/{meal_id}/consumed", json={"consumed": True}
    )
    assert repeated.json()["day"]["consumed_calories"] == 680

    today = client.get(f"{USER_PATH}/days/today").json()["day"]
    assert today["meals"][0]["consumed"] is True
    assert client.get(f"{USER_PATH}/days/2025-03-12").json()["day"] == today


def test_custom_meal_is_recorded_as_eaten(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        f"{USER_PATH}/days/2025-03-11/meals",
        json={"slot": "snack", "name": "Cha and biscuit", "calories": 120},
    )

    assert response.status_code == 200
    day = response.json()["day"]
    assert day["date"] == "2025-03-11"
    assert day["consumed_calories"] == 120


def test_meal_payload_requires_food_or_custom_fields(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        f"{USER_PATH}/days/2025-03-12/meals", json={"slot": "lunch"}
    )

    assert response.status_code == 422


def test_plan_day_schedules_four_meals(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(f"{USER_PATH}/days/2025-03-13/plan", json={})

    assert response.status_code == 200
    data = response.json()
    assert data["plan"]["date"] == "2025-03-13"
    assert [meal["meal_type"] for meal in data["day"]["meals"]] == [
        "breakfast",
        "lunch",
        "dinner",
        "snack",
    ]


def test_water_tasks_and_progress(container) -> None:
    client = TestClient(create_app(container))

    water = client.put(f"{USER_PATH}/water", json={"glasses": 12})
    assert water.json()["day"]["water_glasses"] == 8

    task_day = client.post(f"{USER_PATH}/tasks", json={"text": "Walk"}).json()["day"]
    task_id = task_day["tasks"][0]["id"]
    toggled = client.post(f"{USER_PATH}/tasks/{task_id}/toggle")
    assert toggled.json()["day"]["tasks"][0]["completed"] is True

    progress = client.put(
        f"{USER_PATH}/progress", json={"calories": "abc", "protein": 40}
    )
    day = progress.json()["day"]
    assert day["consumed_calories"] == 0
    assert day["consumed_protein"] == 40
    assert day["manual_override"] is True


def test_not_found_errors(container) -> None:
    client = TestClient(create_app(container))

    missing_day = client.get(f"{USER_PATH}/days/2025-01-01")
    missing_meal = client.post(
        f"{USER_PATH}/meals/unknown/consumed", json={"consumed": True}
    )
    missing_task = client.post(f"{USER_PATH}/tasks/unknown/toggle")
    missing_user = client.get(
        "/users/00000000-0000-0000-0000-000000000000/days/today"
    )

    assert missing_day.status_code == 404
    assert missing_meal.status_code == 404
    assert missing_task.status_code == 404
    assert missing_user.status_code == 404


def test_get_day_reads_stored_day_outside_loaded_range(
    container, day_repository
) -> None:
    day_repository.days[(USER_ID, "2024-06-01")] = DayAggregate(
        date="2024-06-01", goals=GOALS, water_glasses=5
    )
    client = TestClient(create_app(container))

    response = client.get(f"{USER_PATH}/days/2024-06-01")

    assert response.status_code == 200
    assert response.json()["day"]["water_glasses"] == 5


def test_reports(container) -> None:
    client = TestClient(create_app(container))
    meal_id = _schedule_lunch(client)["meals"][0]["id"]
    client.post(f"{USER_PATH}/meals/{meal_id}/consumed", json={"consumed": True})

    report = client.get(f"{USER_PATH}/report").json()
    week = client.get(f"{USER_PATH}/week").json()
    month = client.get(f"{USER_PATH}/month").json()
    streak = client.get(f"{USER_PATH}/streak").json()

    assert report["days_tracked"] == 1
    assert report["avg_calories"] == 680
    assert report["estimated_weight_change_kg"] == round((680 - 2000) / 7700, 1)
    assert week["start"] == "2025-03-10"
    assert len(week["daily"]) == 7
    assert len(month["daily"]) == 31
    assert streak == {"streak": 1}


def test_weight_and_bmi_trend(container) -> None:
    client = TestClient(create_app(container))

    logged = client.post(f"{USER_PATH}/weight", json={"weight_kg": 69.5})
    trend = client.get(f"{USER_PATH}/bmi-trend")

    assert logged.status_code == 200
    assert logged.json()["entry"]["day"] == "2025-03-12"
    points = trend.json()["points"]
    assert points[0]["is_anchor"] is True
    assert points[0]["weight_kg"] == 70.0
    assert points[-1]["weight_kg"] == 69.5


def test_weight_rejects_non_positive(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(f"{USER_PATH}/weight", json={"weight_kg": 0})

    assert response.status_code == 422
