"""Main FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from usersync.infra.clerk import SessionVerifier, WebhookVerifier
from usersync.services import UserStore
from usersync_api.auth import setup_auth
from usersync_api.config import Settings, get_settings
from usersync_api.middleware import get_cors_headers, setup_middleware
from usersync_api.routes import api_router
from usersync_api.services import build_session_verifier, build_user_store, build_webhook_verifier
from usersync_api.services.cosmos_db_init import initialize_cosmos_db

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    user_store: UserStore | None = None,
    webhook_verifier: WebhookVerifier | None = None,
    session_verifier: SessionVerifier | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Collaborators passed in are used as-is. A missing user store is built
    from settings at startup, after the Cosmos database has been prepared.

    Args:
        settings: Application settings, loaded from the environment if omitted
        user_store: User store handle
        webhook_verifier: Webhook signature verifier
        session_verifier: Session token verifier

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(f"{settings.app_name} v{settings.app_version} started")
        logger.info(f"Environment: {settings.environment}")

        if app.state.user_store is None:
            if settings.azure_cosmosdb_endpoint:
                logger.info("Initializing Cosmos DB...")
                await initialize_cosmos_db(settings)
            app.state.user_store = build_user_store(settings)

        if not settings.clerk_webhook_secret:
            logger.warning("CLERK_WEBHOOK_SECRET is not set, webhook requests will be rejected")

        yield

        logger.info(f"{settings.app_name} shutting down")

    app = FastAPI(
        title=settings.app_name,
        description="Clerk user sync - FastAPI backend service",
        version=settings.app_version,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    app.state.settings = settings
    app.state.user_store = user_store
    app.state.webhook_verifier = webhook_verifier or build_webhook_verifier()
    app.state.session_verifier = session_verifier or build_session_verifier(settings)

    # Setup middleware (must be before exception handlers)
    setup_middleware(app, settings)
    setup_auth(app)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Return a generic 500 that still carries CORS headers."""
        logger.error("Unhandled exception: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error!"},
            headers=get_cors_headers(request.headers.get("origin"), settings),
        )

    app.include_router(api_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = app.state.settings
    uvicorn.run(
        app,
        host=_settings.api_host,
        port=_settings.api_port,
        log_level=_settings.log_level.lower(),
    )
