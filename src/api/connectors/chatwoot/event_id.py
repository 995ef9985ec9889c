"""Idempotência inbound para eventos de webhook do Chatwoot."""

from __future__ import annotations

import hashlib
import json
from typing import Any


def compute_webhook_id(payload: dict[str, Any], raw_body: bytes) -> str:
    """Gera chave idempotente baseada em event/account_id/id ou hash do corpo.

    Reentregas do mesmo evento pelo Chatwoot carregam o mesmo `id`, então
    produzem a mesma chave mesmo que a serialização mude.

    Args:
        payload: Payload do webhook (já validado)
        raw_body: Corpo bruto do request

    Returns:
        Identificador estável do evento inbound
    """
    event_id = payload.get("id")
    if event_id is not None and event_id != "":
        event = payload.get("event") or "event"
        account_id = payload.get("account_id", "")
        return f"{event}:{account_id}:{event_id}"

    digest = hashlib.sha256(
        raw_body or json.dumps(payload, sort_keys=True).encode("utf-8")
    ).hexdigest()
    return f"payload:{digest}"
