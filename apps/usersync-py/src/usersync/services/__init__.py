"""Usersync services package."""

from usersync.services.ingestion import (
    IngestionResult,
    WebhookConfigurationError,
    WebhookIngestionService,
    build_user_upsert,
    ingest_webhook,
    resolve_primary_email,
)
from usersync.services.user_store import CosmosUserStore, InMemoryUserStore, UserStore, UserStoreError

__all__ = [
    "CosmosUserStore",
    "InMemoryUserStore",
    "IngestionResult",
    "UserStore",
    "UserStoreError",
    "WebhookConfigurationError",
    "WebhookIngestionService",
    "build_user_upsert",
    "ingest_webhook",
    "resolve_primary_email",
]
