"""Infrastructure layer for external communication."""

from usersync.infra.clerk import (
    ClerkSessionVerifier,
    SessionVerificationError,
    SessionVerifier,
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
