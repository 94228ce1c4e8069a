"""Tests for the webhook ingestion pipeline."""

from collections.abc import Mapping
from unittest.mock import MagicMock

import pytest

from usersync.infra.clerk.webhook_verifier import WebhookVerificationError, WebhookVerifier
from usersync.models.events import ClerkUserData, WebhookEvent
from usersync.services.ingestion import (
    MISSING_SECRET_MESSAGE,
    VERIFICATION_FAILED_MESSAGE,
    WebhookConfigurationError,
    WebhookIngestionService,
    build_user_upsert,
    ingest_webhook,
    resolve_primary_email,
)
from usersync.services.user_store import UserStore, UserStoreError

pytestmark = pytest.mark.unit


class StaticVerifier(WebhookVerifier):
    """Verifier that accepts every payload and returns a fixed event."""

    def __init__(self, event: WebhookEvent) -> None:
        self.event = event
        self.calls: list[tuple[bytes, str, Mapping[str, str]]] = []

    def verify(self, payload: bytes, secret: str, headers: Mapping[str, str]) -> WebhookEvent:
        self.calls.append((payload, secret, headers))
        return self.event


class RejectingVerifier(WebhookVerifier):
    def __init__(self, error: Exception) -> None:
        self.error = error

    def verify(self, payload: bytes, secret: str, headers: Mapping[str, str]) -> WebhookEvent:
        raise self.error


class TestResolvePrimaryEmail:
    def test_picks_entry_matching_primary_id(self, user_data):
        assert resolve_primary_email(ClerkUserData.model_validate(user_data)) == "b@x.com"

    def test_no_match_is_none(self, user_data):
        user_data["primary_email_address_id"] = "e9"
        assert resolve_primary_email(ClerkUserData.model_validate(user_data)) is None

    def test_empty_list_is_none(self, user_data):
        user_data["email_addresses"] = []
        assert resolve_primary_email(ClerkUserData.model_validate(user_data)) is None

    def test_null_list_is_none(self, user_data):
        user_data["email_addresses"] = None
        assert resolve_primary_email(ClerkUserData.model_validate(user_data)) is None

    def test_absent_primary_id_is_none(self, user_data):
        del user_data["primary_email_address_id"]
        assert resolve_primary_email(ClerkUserData.model_validate(user_data)) is None


class TestBuildUserUpsert:
    def test_resolved_email_in_both_branches(self, user_data):
        upsert = build_user_upsert(ClerkUserData.model_validate(user_data))

        assert upsert.create == {"email": "b@x.com", "first_name": "Ada", "last_name": "Lovelace"}
        assert upsert.update == {"email": "b@x.com", "first_name": "Ada", "last_name": "Lovelace"}

    def test_unresolved_email_creates_empty_and_update_skips_email(self, user_data):
        user_data["primary_email_address_id"] = "missing"
        upsert = build_user_upsert(ClerkUserData.model_validate(user_data))

        assert upsert.create["email"] == ""
        assert "email" not in upsert.update

    def test_absent_names_are_none(self):
        upsert = build_user_upsert(ClerkUserData(id="user_1"))

        assert upsert.create == {"email": "", "first_name": None, "last_name": None}
        assert upsert.update == {"first_name": None, "last_name": None}


class TestWebhookIngestionService:
    def test_created_event_creates_record(self, store, user_data, make_event):
        result = WebhookIngestionService(store).handle_event(make_event("user.created", user_data))

        assert result.status == "synced"
        assert result.clerk_user_id == "user_2abc"
        user = store.get_user("user_2abc")
        assert user is not None
        assert user.email == "b@x.com"
        assert user.first_name == "Ada"
        assert user.last_name == "Lovelace"

    def test_same_created_event_twice_is_idempotent(self, store, user_data, make_event):
        service = WebhookIngestionService(store)
        event = make_event("user.created", user_data)

        service.handle_event(event)
        first = store.get_user("user_2abc")
        service.handle_event(event)

        assert len(store) == 1
        assert store.get_user("user_2abc") == first

    def test_updated_event_overwrites_fields(self, store, user_data, make_event):
        service = WebhookIngestionService(store)
        service.handle_event(make_event("user.created", user_data))

        user_data["primary_email_address_id"] = "e1"
        user_data["first_name"] = "Augusta"
        service.handle_event(make_event("user.updated", user_data))

        user = store.get_user("user_2abc")
        assert user.email == "a@x.com"
        assert user.first_name == "Augusta"
        assert len(store) == 1

    def test_updated_event_without_primary_keeps_stored_email(self, store, user_data, make_event):
        service = WebhookIngestionService(store)
        service.handle_event(make_event("user.created", user_data))

        user_data["email_addresses"] = []
        service.handle_event(make_event("user.updated", user_data))

        assert store.get_user("user_2abc").email == "b@x.com"

    def test_updated_event_for_unknown_user_creates_it(self, store, user_data, make_event):
        WebhookIngestionService(store).handle_event(make_event("user.updated", user_data))

        assert store.get_user("user_2abc").email == "b@x.com"

    def test_created_without_primary_stores_empty_email(self, store, user_data, make_event):
        user_data["primary_email_address_id"] = None
        WebhookIngestionService(store).handle_event(make_event("user.created", user_data))

        assert store.get_user("user_2abc").email == ""

    @pytest.mark.parametrize("event_type", ["user.deleted", "session.created", "organization.updated"])
    def test_other_event_types_are_ignored(self, event_type, user_data, make_event):
        store = MagicMock(spec=UserStore)

        result = WebhookIngestionService(store).handle_event(make_event(event_type, user_data))

        assert result.status == "ignored"
        assert result.event_type == event_type
        store.upsert_user.assert_not_called()


class TestIngestWebhook:
    def test_missing_secret_fails_before_verification(self, store, user_data, make_event):
        verifier = StaticVerifier(make_event("user.created", user_data))

        for secret in (None, ""):
            with pytest.raises(WebhookConfigurationError, match=MISSING_SECRET_MESSAGE):
                ingest_webhook(b"{}", {}, secret, verifier, WebhookIngestionService(store))

        assert verifier.calls == []
        assert len(store) == 0

    def test_passes_raw_payload_secret_and_headers_to_verifier(self, store, user_data, make_event):
        verifier = StaticVerifier(make_event("user.created", user_data))
        headers = {"svix-id": "msg_1", "svix-timestamp": "1", "svix-signature": "v1,abc"}

        result = ingest_webhook(b'{"raw": true}', headers, "whsec_test", verifier, WebhookIngestionService(store))

        assert result.status == "synced"
        assert verifier.calls == [(b'{"raw": true}', "whsec_test", headers)]

    @pytest.mark.parametrize(
        "error",
        [WebhookVerificationError("No matching signature found"), ValueError("bad secret"), KeyError("data")],
    )
    def test_any_verifier_error_is_generic_and_never_mutates_store(self, error, caplog):
        store = MagicMock(spec=UserStore)

        with pytest.raises(WebhookVerificationError) as exc_info:
            ingest_webhook(b"{}", {}, "whsec_test", RejectingVerifier(error), WebhookIngestionService(store))

        assert str(exc_info.value) == VERIFICATION_FAILED_MESSAGE
        assert exc_info.value.__cause__ is error
        assert "error verifying webhook" in caplog.text
        store.upsert_user.assert_not_called()

    def test_user_event_without_id_is_rejected(self, store, make_event):
        verifier = StaticVerifier(make_event("user.created", {"email_addresses": []}))

        with pytest.raises(WebhookVerificationError, match=VERIFICATION_FAILED_MESSAGE):
            ingest_webhook(b"{}", {}, "whsec_test", verifier, WebhookIngestionService(store))

        assert len(store) == 0

    def test_store_failure_is_generic_verification_error(self, user_data, make_event, caplog):
        store = MagicMock(spec=UserStore)
        store.upsert_user.side_effect = UserStoreError("Failed to create user user_2abc")
        verifier = StaticVerifier(make_event("user.created", user_data))

        with pytest.raises(WebhookVerificationError, match=VERIFICATION_FAILED_MESSAGE) as exc_info:
            ingest_webhook(b"{}", {}, "whsec_test", verifier, WebhookIngestionService(store))

        assert isinstance(exc_info.value.__cause__, UserStoreError)
        assert "error applying user.created webhook" in caplog.text
