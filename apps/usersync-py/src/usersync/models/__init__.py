"""Usersync models package."""

from usersync.models.auth import AuthContext
from usersync.models.events import (
    USER_CREATED,
    USER_SYNC_EVENT_TYPES,
    USER_UPDATED,
    ClerkEmailAddress,
    ClerkUserData,
    WebhookEvent,
)
from usersync.models.user import User, UserUpsert

__all__ = [
    "USER_CREATED",
    "USER_SYNC_EVENT_TYPES",
    "USER_UPDATED",
    "AuthContext",
    "ClerkEmailAddress",
    "ClerkUserData",
    "User",
    "UserUpsert",
    "WebhookEvent",
]
