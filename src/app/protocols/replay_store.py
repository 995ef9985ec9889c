"""Protocolo do store de replay/idempotência de webhooks.

Interfaces leves (ABCs) dependidas por Application.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.security import ReplayStatus


class ReplayStoreProtocol(ABC):
    """Contrato do store de identificadores de webhook já vistos.

    Métodos canônicos:
    - check_and_record(identifier, ttl) -> ReplayStatus
      Operação única e atômica: registra e retorna FRESH se o identificador
      é desconhecido (ou expirou); retorna DUPLICATE sem mutar o estado.
    - release(identifier) -> None
      Remove o registro quando o dispatch downstream falha.

    Falhas de backend levantam RedisConnectionError.
    """

    @abstractmethod
    async def check_and_record(self, identifier: str, ttl: int) -> ReplayStatus:
        """Verifica e registra o identificador de forma atômica.

        Args:
            identifier: Identificador determinístico do webhook (nunca PII)
            ttl: TTL do registro em segundos

        Returns:
            FRESH na primeira vez dentro do TTL; DUPLICATE nas demais.
        """

    @abstractmethod
    async def release(self, identifier: str) -> None:
        """Remove o registro para permitir reentrega do webhook."""
