"""Error types raised by the planning and tracking core."""


class MealPlanError(Exception):
    """Base class for meal planning errors."""


class CatalogEmptyError(MealPlanError):
    """A slot has no catalog items to select from."""

    def __init__(self, slot: str) -> None:
        super().__init__(f"Catalog has no items for slot '{slot}'")
        self.slot = slot


class NoAggregateForDateError(MealPlanError):
    """No day aggregate exists for the requested date."""

    def __init__(self, day: str) -> None:
        super().__init__(f"No day aggregate for {day}")
        self.day = day


class InvalidNumericInputError(MealPlanError):
    """A numeric field received a value that is not a finite number."""

    def __init__(self, field: str, value: object) -> None:
        super().__init__(f"Invalid numeric value for {field}: {value!r}")
        self.field = field
        self.value = value


class MealNotFoundError(MealPlanError):
    """A meal id is not present in any day aggregate."""

    def __init__(self, meal_id: str) -> None:
        super().__init__(f"Meal {meal_id} is not scheduled on any day")
        self.meal_id = meal_id


class TaskNotFoundError(MealPlanError):
    """A task id is not present in today's aggregate."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} is not part of today's plan")
        self.task_id = task_id


class ProfileNotFoundError(MealPlanError):
    """No profile exists for a user."""

    def __init__(self, user_id: object) -> None:
        super().__init__(f"No profile for user {user_id}")
        self.user_id = user_id
