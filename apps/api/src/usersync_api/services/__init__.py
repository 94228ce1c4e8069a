"""Service construction and dependency injection.

Collaborators are built once per application and kept on ``app.state``;
the FastAPI dependencies below hand them to routes.
"""

import logging

from fastapi import Depends, Request
from usersync.infra.clerk import ClerkSessionVerifier, SessionVerifier, SvixWebhookVerifier, WebhookVerifier
from usersync.services import CosmosUserStore, InMemoryUserStore, UserStore, WebhookIngestionService
from usersync_api.config import Settings

logger = logging.getLogger(__name__)


def build_user_store(settings: Settings) -> UserStore:
    """Create the user store configured by settings.

    Args:
        settings: Application settings

    Returns:
        CosmosUserStore when AZURE_COSMOSDB_ENDPOINT is set, otherwise an InMemoryUserStore

    Raises:
        ValueError: If no Cosmos endpoint is configured in production
    """
    if settings.azure_cosmosdb_endpoint:
        store = CosmosUserStore(
            cosmos_endpoint=settings.azure_cosmosdb_endpoint,
            cosmos_key=settings.azure_cosmosdb_key,
            database_name=settings.database_name,
            container_name=settings.cosmos_users_container,
            use_managed_identity=settings.azure_cosmosdb_key is None,
        )
        logger.info("Initialized CosmosUserStore")
        return store

    if settings.environment == "production":
        raise ValueError("AZURE_COSMOSDB_ENDPOINT is required")

    logger.warning("AZURE_COSMOSDB_ENDPOINT not set, using in-memory user store (data is not persisted)")
    return InMemoryUserStore()


def build_webhook_verifier() -> WebhookVerifier:
    return SvixWebhookVerifier()


def build_session_verifier(settings: Settings) -> SessionVerifier | None:
    """Create the session verifier, or None when CLERK_JWT_KEY is not configured."""
    if not settings.clerk_jwt_key:
        logger.warning("CLERK_JWT_KEY not set, protected routes will reject every request")
        return None

    # PEM keys are often stored in env files with escaped newlines
    jwt_key = settings.clerk_jwt_key.replace("\\n", "\n")
    return ClerkSessionVerifier(
        jwt_key=jwt_key,
        authorized_parties=settings.authorized_parties,
        clock_skew_seconds=settings.clerk_clock_skew_seconds,
    )


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_webhook_verifier(request: Request) -> WebhookVerifier:
    return request.app.state.webhook_verifier


def get_session_verifier(request: Request) -> SessionVerifier | None:
    return request.app.state.session_verifier


def get_ingestion_service(store: UserStore = Depends(get_user_store)) -> WebhookIngestionService:
    return WebhookIngestionService(store)
