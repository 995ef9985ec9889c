"""Gerenciamento de request_id para rastreamento de requisições.

O request_id vem do header X-Request-ID ou é gerado (`req_<16 hex>`),
é ecoado na resposta e injetado em todos os logs.
Usa ContextVar para ser async-safe.

Uso:
    token = set_request_id(request.headers.get("x-request-id"))
    try:
        # processar request
    finally:
        reset_request_id(token)
"""

from __future__ import annotations

import secrets
from contextvars import ContextVar, Token

REQUEST_ID_HEADER = "X-Request-ID"

# Limite para valores recebidos do cliente
_MAX_REQUEST_ID_LENGTH = 128

_request_id: ContextVar[str] = ContextVar("request_id", default="")


def generate_request_id() -> str:
    """Gera um novo request_id no formato `req_<16 hex>`."""
    return f"req_{secrets.token_hex(8)}"


def get_request_id() -> str:
    """Retorna o request_id do contexto atual (string vazia se não definido)."""
    return _request_id.get()


def set_request_id(request_id: str | None = None) -> Token[str]:
    """Define o request_id no contexto atual.

    Valores vazios ou longos demais são substituídos por um id gerado.

    Returns:
        Token para reset posterior via reset_request_id().
    """
    value = (request_id or "").strip()
    if not value or len(value) > _MAX_REQUEST_ID_LENGTH:
        value = generate_request_id()
    return _request_id.set(value)


def reset_request_id(token: Token[str]) -> None:
    _request_id.reset(token)
