"""User record model for the local user store."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """User record synchronized from Clerk, keyed by the Clerk user id."""

    clerk_user_id: str = Field(..., alias="clerkUserId", description="Clerk user id (unique, immutable)")
    email: str | None = Field(None, description="Primary email address, empty string when unresolved on create")
    first_name: str | None = Field(None, alias="firstName", description="Given name")
    last_name: str | None = Field(None, alias="lastName", description="Family name")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        alias="createdAt",
        description="When the record was first created",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "clerkUserId": "user_2abc123",
                "email": "jane.doe@example.com",
                "firstName": "Jane",
                "lastName": "Doe",
                "createdAt": "2024-01-01T00:00:00Z",
            }
        },
    )


class UserUpsert(BaseModel):
    """Field sets applied by an upsert: ``create`` when the record is new, ``update`` otherwise."""

    create: dict[str, Any] = Field(default_factory=dict)
    update: dict[str, Any] = Field(default_factory=dict)
