"""Webhook signature verification for Clerk (delivered through Svix)."""

from abc import ABC, abstractmethod
from collections.abc import Mapping

from pydantic import ValidationError
from svix.webhooks import Webhook

from usersync.models.events import WebhookEvent

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


class WebhookVerificationError(Exception):
    """Raised when an inbound webhook cannot be authenticated or parsed."""


class WebhookVerifier(ABC):
    """Authenticates a raw webhook payload and returns the typed event."""

    @abstractmethod
    def verify(self, payload: bytes, secret: str, headers: Mapping[str, str]) -> WebhookEvent:
        """Verify the payload signature.

        Args:
            payload: Raw, unparsed request body
            secret: Shared signing secret
            headers: Request headers carrying the signature

        Returns:
            The verified WebhookEvent

        Raises:
            WebhookVerificationError: If the payload is not authentic or not an event
        """
        pass


class SvixWebhookVerifier(WebhookVerifier):
    """Verifies Svix-signed payloads using the svix library."""

    def verify(self, payload: bytes, secret: str, headers: Mapping[str, str]) -> WebhookEvent:
        signature_headers = {name: headers.get(name, "") for name in SVIX_HEADERS}
        try:
            Webhook(secret).verify(payload, signature_headers)
        except Exception as e:
            # svix raises its own error for bad signatures but plain errors for a malformed secret or body
            raise WebhookVerificationError(f"{type(e).__name__}: {e}") from e

        # svix 2.x verify returns None, so the event is read from the authenticated bytes
        try:
            return WebhookEvent.model_validate_json(payload)
        except ValidationError as e:
            raise WebhookVerificationError(f"payload is not a webhook event: {e}") from e
