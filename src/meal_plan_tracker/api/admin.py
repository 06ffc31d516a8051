"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from meal_plan_tracker.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health(request: Request) -> dict[str, object]:
    """Admin health check with catalog and loaded-store counts."""
    container: AppContainer = request.app.state.container
    return {
        "status": "ok",
        "catalog_size": len(container.catalog.all_foods()),
        "loaded_users": len(container.tracking_service.loaded_users()),
    }


@router.get("/users/{user_id}/days", dependencies=[Depends(require_admin)])
async def user_days(user_id: UUID, request: Request) -> dict[str, object]:
    """Return every day aggregate loaded for a user, oldest first."""
    container: AppContainer = request.app.state.container
    store = await container.tracking_service.store_for(user_id)
    days = sorted(store.days.values(), key=lambda aggregate: aggregate.date)
    return {
        "user_id": str(user_id),
        "goals": asdict(store.goals),
        "days": [asdict(day) for day in days],
    }
