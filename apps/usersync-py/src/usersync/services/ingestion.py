"""Clerk webhook ingestion: verify, interpret and upsert user events."""

import logging
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ValidationError

from usersync.infra.clerk.webhook_verifier import WebhookVerificationError, WebhookVerifier
from usersync.models.events import ClerkUserData, WebhookEvent
from usersync.models.user import UserUpsert
from usersync.services.user_store import UserStore, UserStoreError

logger = logging.getLogger(__name__)

MISSING_SECRET_MESSAGE = "CLERK_WEBHOOK_SECRET is missing!"
VERIFICATION_FAILED_MESSAGE = "webhook verification failed!"


class WebhookConfigurationError(Exception):
    """Raised when the webhook signing secret is not configured."""


class IngestionResult(BaseModel):
    """Outcome of handling one verified event."""

    status: Literal["synced", "ignored"]
    event_type: str
    clerk_user_id: str | None = None


def resolve_primary_email(data: ClerkUserData) -> str | None:
    """Return the address of the entry whose id is the primary email id, if any."""
    if not data.primary_email_address_id:
        return None
    for entry in data.email_addresses:
        if entry.id == data.primary_email_address_id:
            return entry.email_address
    return None


def build_user_upsert(data: ClerkUserData) -> UserUpsert:
    """Build the create and update field sets for a user event.

    A new record gets an empty email when no primary address resolves. An
    existing record keeps its stored email in that case instead of being
    cleared.
    """
    email = resolve_primary_email(data)
    names = {"first_name": data.first_name, "last_name": data.last_name}

    update = dict(names)
    if email is not None:
        update["email"] = email

    return UserUpsert(create={"email": email or "", **names}, update=update)


class WebhookIngestionService:
    """Applies verified Clerk events to the user store."""

    def __init__(self, user_store: UserStore) -> None:
        self.user_store = user_store

    def handle_event(self, event: WebhookEvent) -> IngestionResult:
        """Upsert the user for ``user.created``/``user.updated``; ignore anything else.

        Raises:
            ValidationError: If a user event's data lacks the fields we sync
        """
        if not event.is_user_sync:
            logger.info("Ignoring webhook event type %s", event.type)
            return IngestionResult(status="ignored", event_type=event.type)

        data = ClerkUserData.model_validate(event.data)
        upsert = build_user_upsert(data)
        self.user_store.upsert_user(data.id, create=upsert.create, update=upsert.update)
        logger.info("Synced user %s from %s", data.id, event.type)
        return IngestionResult(status="synced", event_type=event.type, clerk_user_id=data.id)


def ingest_webhook(
    payload: bytes,
    headers: Mapping[str, str],
    secret: str | None,
    verifier: WebhookVerifier,
    service: WebhookIngestionService,
) -> IngestionResult:
    """Run one inbound webhook request through configuration, verification and sync.

    Args:
        payload: Raw request body
        headers: Request headers
        secret: Configured signing secret
        verifier: Signature verifier
        service: Ingestion service bound to a user store

    Returns:
        IngestionResult for the event

    Raises:
        WebhookConfigurationError: If no secret is configured (nothing is verified)
        WebhookVerificationError: If the payload is not authentic or not a valid user event.
            The message is always generic; the cause is logged. Store failures while
            applying a verified event are reported the same way.
    """
    if not secret:
        raise WebhookConfigurationError(MISSING_SECRET_MESSAGE)

    try:
        event = verifier.verify(payload, secret, headers)
    except Exception as e:
        logger.warning("error verifying webhook: %s", e)
        raise WebhookVerificationError(VERIFICATION_FAILED_MESSAGE) from e

    try:
        return service.handle_event(event)
    except ValidationError as e:
        logger.warning("error reading %s webhook data: %s", event.type, e)
        raise WebhookVerificationError(VERIFICATION_FAILED_MESSAGE) from e
    except UserStoreError as e:
        logger.error("error applying %s webhook: %s", event.type, e, exc_info=True)
        raise WebhookVerificationError(VERIFICATION_FAILED_MESSAGE) from e
