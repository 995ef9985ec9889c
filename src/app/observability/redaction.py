"""Helpers de redação para logs de segurança.

Nada que identifique o cliente ou autentique uma chamada vai para o log
em claro: identidades são mascaradas, tokens viram fingerprint e payloads
têm campos sensíveis substituídos.
"""

from __future__ import annotations

import hashlib
from typing import Any

REDACTED = "[REDACTED]"

SENSITIVE_FIELDS = frozenset(
    {
        "password",
        "password_confirmation",
        "token",
        "access_token",
        "refresh_token",
        "secret",
        "authorization",
        "api_key",
        "cpf",
        "rg",
        "phone_number",
        "email",
    }
)


def mask_identifier(value: str | None, visible: int = 4) -> str:
    """Mascara um identificador mantendo prefixo de tipo e poucos caracteres.

    Exemplos:
        mask_identifier("ip:203.0.113.42") -> "ip:203.***"
        mask_identifier("user:8812") -> "user:***"
    """
    if not value:
        return ""
    prefix, sep, rest = value.partition(":")
    if not sep:
        prefix, rest = "", value
    masked = rest[:visible] + "***" if len(rest) > visible else "***"
    return f"{prefix}:{masked}" if sep else masked


def fingerprint_token(token: str | None) -> str:
    """Fingerprint curta e não reversível de um token (sha256, 12 hex)."""
    if not token:
        return ""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]


def redact_payload(payload: Any, _depth: int = 0) -> Any:
    """Retorna cópia do payload com campos sensíveis substituídos.

    Percorre dicts e listas aninhados (profundidade máxima 8).
    """
    if _depth > 8:
        return REDACTED
    if isinstance(payload, dict):
        return {
            key: (
                REDACTED
                if str(key).lower() in SENSITIVE_FIELDS
                else redact_payload(value, _depth + 1)
            )
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [redact_payload(item, _depth + 1) for item in payload]
    return payload
