"""Pytest configuration and fixtures."""

import json
from collections.abc import Mapping

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from usersync.infra.clerk import (
    SessionVerificationError,
    SessionVerifier,
    WebhookVerificationError,
    WebhookVerifier,
)
from usersync.models.auth import AuthContext
from usersync.models.events import WebhookEvent
from usersync.services import InMemoryUserStore
from usersync_api.config import Settings
from usersync_api.main import create_app

VALID_SIGNATURE = "v1,valid"
VALID_TOKEN = "valid-session-token"


class FakeWebhookVerifier(WebhookVerifier):
    """Accepts payloads whose svix-signature header is VALID_SIGNATURE."""

    def __init__(self) -> None:
        self.calls = 0

    def verify(self, payload: bytes, secret: str, headers: Mapping[str, str]) -> WebhookEvent:
        self.calls += 1
        if headers.get("svix-signature") != VALID_SIGNATURE:
            raise WebhookVerificationError("No matching signature found")
        return WebhookEvent.model_validate(json.loads(payload))


class FakeSessionVerifier(SessionVerifier):
    """Accepts only VALID_TOKEN."""

    def verify_token(self, token: str) -> AuthContext:
        if token != VALID_TOKEN:
            raise SessionVerificationError("invalid session token")
        return AuthContext.from_claims({"sub": "user_2abc", "sid": "sess_2abc", "azp": "http://localhost:5173"})


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and .env files."""
    return Settings(_env_file=None, environment="test", clerk_webhook_secret="whsec_test")


@pytest.fixture
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def webhook_verifier() -> FakeWebhookVerifier:
    return FakeWebhookVerifier()


@pytest.fixture
def app(settings, store, webhook_verifier) -> FastAPI:
    """Application wired to in-memory collaborators."""
    return create_app(
        settings,
        user_store=store,
        webhook_verifier=webhook_verifier,
        session_verifier=FakeSessionVerifier(),
    )


@pytest.fixture
def client(app) -> TestClient:
    """Create a FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def user_event() -> dict:
    """Clerk user.created event body."""
    return {
        "type": "user.created",
        "object": "event",
        "data": {
            "id": "user_2abc",
            "email_addresses": [
                {"id": "e1", "email_address": "a@x.com"},
                {"id": "e2", "email_address": "b@x.com"},
            ],
            "primary_email_address_id": "e2",
            "first_name": "Ada",
            "last_name": "Lovelace",
        },
    }


@pytest.fixture
def signed_headers() -> dict[str, str]:
    return {
        "svix-id": "msg_2abc",
        "svix-timestamp": "1700000000",
        "svix-signature": VALID_SIGNATURE,
        "content-type": "application/json",
    }
