"""Pytest configuration and fixtures for usersync tests."""

from collections.abc import Callable
from typing import Any

import pytest

from usersync.models.events import WebhookEvent
from usersync.services.user_store import InMemoryUserStore


@pytest.fixture
def store() -> InMemoryUserStore:
    """Fresh in-memory user store."""
    return InMemoryUserStore()


@pytest.fixture
def user_data() -> dict[str, Any]:
    """Clerk ``user.*`` data body with two addresses, the second one primary."""
    return {
        "id": "user_2abc",
        "object": "user",
        "email_addresses": [
            {"id": "e1", "object": "email_address", "email_address": "a@x.com"},
            {"id": "e2", "object": "email_address", "email_address": "b@x.com"},
        ],
        "primary_email_address_id": "e2",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "image_url": "https://img.clerk.com/abc",
    }


@pytest.fixture
def make_event() -> Callable[..., WebhookEvent]:
    """Factory for webhook events."""

    def _make(event_type: str, data: dict[str, Any]) -> WebhookEvent:
        return WebhookEvent(type=event_type, data=data, object="event", timestamp=1700000000000)

    return _make
