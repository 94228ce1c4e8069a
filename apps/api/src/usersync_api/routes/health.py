"""Health check routes."""

from fastapi import APIRouter, Depends
from usersync.services import UserStore
from usersync_api.config import Settings
from usersync_api.models.health import HealthCheckResponse
from usersync_api.services import get_app_settings, get_user_store

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
    store: UserStore = Depends(get_user_store),
) -> HealthCheckResponse:
    """Health check endpoint.

    Returns:
        HealthCheckResponse with status, version and sync configuration
    """
    return HealthCheckResponse(
        status="ok",
        version=settings.app_version,
        environment=settings.environment,
        store_backend=store.backend,
        webhook_configured=bool(settings.clerk_webhook_secret),
    )
