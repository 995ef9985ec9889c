"""Testes do identificador de idempotência dos webhooks do Chatwoot."""

from __future__ import annotations

import hashlib

from api.connectors.chatwoot.event_id import compute_webhook_id


def test_uses_event_account_and_id() -> None:
    payload = {"event": "message_created", "account_id": 1, "id": 123}

    assert compute_webhook_id(payload, b"{}") == "message_created:1:123"


def test_same_event_with_different_serialization_has_same_id() -> None:
    payload = {"event": "conversation_created", "account_id": 2, "id": 9}

    first = compute_webhook_id(payload, b'{"id":9}')
    second = compute_webhook_id(payload, b'{ "id": 9 }')

    assert first == second


def test_falls_back_to_body_hash_without_id() -> None:
    raw = b'{"event":"message_created"}'

    result = compute_webhook_id({"event": "message_created"}, raw)

    assert result == f"payload:{hashlib.sha256(raw).hexdigest()}"
