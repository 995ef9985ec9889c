"""Settings específicas dos webhooks do Chatwoot.

Segurança de entrada: secret HMAC, tolerância de relógio e tamanho máximo
de payload.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

SIGNATURE_HEADER: str = "X-Chatwoot-Signature"
TIMESTAMP_HEADER: str = "X-Chatwoot-Timestamp"


@dataclass(frozen=True)
class ChatwootSettings:
    """Configurações do canal Chatwoot.

    Attributes:
        webhook_secret: Secret compartilhado para HMAC-SHA256
        timestamp_tolerance_seconds: Diferença máxima aceita entre relógios
        max_payload_bytes: Tamanho máximo do corpo do webhook
        signature_header: Header com a assinatura (sha256=<hex>)
        timestamp_header: Header com o timestamp Unix do envio
    """

    webhook_secret: str = ""
    timestamp_tolerance_seconds: int = 300
    max_payload_bytes: int = 1024 * 1024  # 1MB

    signature_header: str = SIGNATURE_HEADER
    timestamp_header: str = TIMESTAMP_HEADER

    def validate(self) -> list[str]:
        """Valida configurações mínimas de webhook.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.webhook_secret:
            errors.append("CHATWOOT_WEBHOOK_SECRET não configurado")

        if self.timestamp_tolerance_seconds <= 0:
            errors.append("WEBHOOK_TIMESTAMP_TOLERANCE deve ser > 0")

        if self.max_payload_bytes <= 0:
            errors.append("WEBHOOK_MAX_PAYLOAD_SIZE deve ser > 0")

        return errors


def _load_from_env() -> ChatwootSettings:
    """Carrega ChatwootSettings a partir de variáveis de ambiente."""
    return ChatwootSettings(
        webhook_secret=os.getenv("CHATWOOT_WEBHOOK_SECRET", ""),
        timestamp_tolerance_seconds=int(os.getenv("WEBHOOK_TIMESTAMP_TOLERANCE", "300")),
        max_payload_bytes=int(os.getenv("WEBHOOK_MAX_PAYLOAD_SIZE", str(1024 * 1024))),
    )


@lru_cache(maxsize=1)
def get_chatwoot_settings() -> ChatwootSettings:
    """Retorna instância cacheada de ChatwootSettings."""
    return _load_from_env()
