"""Route initialization module."""

from fastapi import APIRouter
from usersync_api.routes.health import router as health_router
from usersync_api.routes.protected import router as protected_router
from usersync_api.routes.user import router as user_router
from usersync_api.routes.webhooks import router as webhooks_router

# Create main API router
api_router = APIRouter(prefix="/api")

# Include sub-routers
api_router.include_router(health_router)
api_router.include_router(webhooks_router)
api_router.include_router(protected_router)
api_router.include_router(user_router)


__all__ = ["api_router"]
