"""Clerk identity provider adapters."""

from usersync.infra.clerk.session_verifier import (
    ClerkSessionVerifier,
    SessionVerificationError,
    SessionVerifier,
)
from usersync.infra.clerk.webhook_verifier import (
    SvixWebhookVerifier,
    WebhookVerificationError,
    WebhookVerifier,
)

__all__ = [
    "ClerkSessionVerifier",
    "SessionVerificationError",
    "SessionVerifier",
    "SvixWebhookVerifier",
    "WebhookVerificationError",
    "WebhookVerifier",
]
