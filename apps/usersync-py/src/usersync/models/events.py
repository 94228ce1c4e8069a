"""Clerk webhook event models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

USER_CREATED = "user.created"
USER_UPDATED = "user.updated"

# Event types that write to the user store; everything else is accepted and ignored.
USER_SYNC_EVENT_TYPES = frozenset({USER_CREATED, USER_UPDATED})


class ClerkEmailAddress(BaseModel):
    """One entry of a Clerk user's ``email_addresses`` list."""

    id: str
    email_address: str

    model_config = ConfigDict(extra="ignore")


class ClerkUserData(BaseModel):
    """The ``data`` body of a ``user.*`` event (only the fields we sync)."""

    id: str = Field(..., description="Clerk user id")
    email_addresses: list[ClerkEmailAddress] = Field(default_factory=list)
    primary_email_address_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("email_addresses", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class WebhookEvent(BaseModel):
    """A verified Clerk webhook event."""

    type: str = Field(..., description="Event type discriminator, e.g. user.created")
    data: dict[str, Any] = Field(default_factory=dict)
    object: str | None = None
    timestamp: int | None = None

    model_config = ConfigDict(extra="ignore")

    @property
    def is_user_sync(self) -> bool:
        return self.type in USER_SYNC_EVENT_TYPES
