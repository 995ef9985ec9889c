"""Testes dos validadores de payload (webhooks, LGPD e exportação)."""

from __future__ import annotations

import pytest

from api.validators.chatwoot import (
    validate_bulk_export,
    validate_consent,
    validate_contact_reference,
    validate_conversation_created,
    validate_conversation_status_changed,
    validate_export_reference,
    validate_message_created,
)
from utils.errors import ValidationError


def _message(**overrides) -> dict:
    payload = {
        "event": "message_created",
        "id": 1,
        "conversation_id": 2,
        "account_id": 3,
        "content": "oi",
        "message_type": "incoming",
        "created_at": "2024-05-01T12:00:00Z",
        "sender": {"id": 4, "name": "Ana", "type": "contact"},
    }
    payload.update(overrides)
    return payload


class TestMessageCreated:
    def test_valid_payload_is_normalized(self) -> None:
        data = validate_message_created({**_message(), "unknown_field": "x"})

        assert data["content_type"] == "text"
        assert data["private"] is False
        assert data["attachments"] == []
        assert "unknown_field" not in data

    def test_content_limit(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_message_created(_message(content="x" * 10001))

        assert "content" in exc_info.value.details

    def test_nested_sender_errors_use_dotted_path(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_message_created(_message(sender={"id": 4, "name": "Ana", "type": "robot"}))

        assert exc_info.value.message == "Webhook validation failed"
        assert "sender.type" in exc_info.value.details

    def test_wrong_event_name(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_message_created(_message(event="conversation_created"))

        assert "event" in exc_info.value.details


class TestConversationEvents:
    def test_conversation_created(self) -> None:
        data = validate_conversation_created(
            {
                "event": "conversation_created",
                "id": 7,
                "account_id": 1,
                "inbox_id": 2,
                "contact_id": 3,
                "status": "open",
                "created_at": 1714564800,
                "contact": {"id": 3, "name": "Ana", "phone_number": "+5511999999999"},
                "labels": ["cardiologia"],
            }
        )

        assert data["contact"]["phone_number"] == "+5511999999999"
        assert data["assignee"] is None

    def test_status_changed_rejects_unknown_status(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_conversation_status_changed(
                {
                    "event": "conversation_status_changed",
                    "id": 7,
                    "account_id": 1,
                    "status": "archived",
                    "changed_at": "2024-05-01T12:00:00Z",
                }
            )

        assert "status" in exc_info.value.details


class TestLgpd:
    def test_consent(self) -> None:
        data = validate_consent(
            {
                "contact_id": 1,
                "consent_type": "data_processing",
                "consent_granted": False,
                "ip_address": "2001:db8::1",
            }
        )

        assert data["ip_address"] == "2001:db8::1"

    def test_consent_rejects_invalid_fields(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_consent(
                {
                    "contact_id": 0,
                    "consent_type": "newsletter",
                    "consent_granted": True,
                    "ip_address": "999.1.1.1",
                }
            )

        details = exc_info.value.details
        assert exc_info.value.message == "Validation failed"
        assert {"contact_id", "consent_type", "ip_address"} <= set(details)

    def test_contact_reference_coerces_path_param(self) -> None:
        assert validate_contact_reference({"contact_id": "12"}) == {"contact_id": 12}


class TestExport:
    def test_bulk_export_defaults(self) -> None:
        data = validate_bulk_export({"contact_ids": [1, 2, 3]})

        assert data["format"] == "json"
        assert data["include_conversations"] is False

    @pytest.mark.parametrize(
        "payload",
        [
            {"contact_ids": []},
            {"contact_ids": list(range(1, 102))},
            {"contact_ids": [0]},
            {"contact_ids": [1], "format": "pdf"},
        ],
    )
    def test_bulk_export_rejections(self, payload: dict) -> None:
        with pytest.raises(ValidationError):
            validate_bulk_export(payload)

    def test_export_reference_rejects_path_tricks(self) -> None:
        with pytest.raises(ValidationError):
            validate_export_reference({"export_id": "../etc"})

        assert validate_export_reference({"export_id": "exp_123"}) == {"export_id": "exp_123"}
