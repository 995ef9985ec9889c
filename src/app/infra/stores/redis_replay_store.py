"""Redis Replay Store: idempotência de webhooks com SET NX.

Usa SET NX EX para a verificação e o registro em uma única operação
atômica, segura entre instâncias.

Contrato de Keys:
    Identificadores são opacos ({event}:{account_id}:{id} ou hash).
    Keys são logadas parcialmente em DEBUG.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from app.domain.security import ReplayStatus
from app.protocols.replay_store import ReplayStoreProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

# Prefixo para namespace de replay
REPLAY_PREFIX = "webhook_processed:"


def _mask(identifier: str) -> str:
    return identifier[:8] + "..." if len(identifier) > 8 else identifier


class RedisReplayStore(ReplayStoreProtocol):
    """Store de replay usando Redis (cliente assíncrono).

    Args:
        redis_client: Cliente redis.asyncio
    """

    def __init__(self, redis_client: AsyncRedis) -> None:
        self._redis = redis_client

    def _key(self, identifier: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{REPLAY_PREFIX}{identifier}"

    async def check_and_record(self, identifier: str, ttl: int) -> ReplayStatus:
        """Verifica e registra atomicamente.

        - Se a chave não existe: cria com TTL e retorna FRESH
        - Se existe: retorna DUPLICATE sem tocar no TTL
        """
        try:
            # Valor = received_at; SET NX retorna True se criou
            was_set = await self._redis.set(
                self._key(identifier), str(int(time.time())), nx=True, ex=ttl
            )
        except Exception as exc:
            raise RedisConnectionError("Falha ao registrar webhook no Redis") from exc

        if not was_set:
            logger.debug("replay_duplicate_detected", extra={"key": _mask(identifier)})
            return ReplayStatus.DUPLICATE
        return ReplayStatus.FRESH

    async def release(self, identifier: str) -> None:
        try:
            await self._redis.delete(self._key(identifier))
        except Exception as exc:
            raise RedisConnectionError("Falha ao liberar registro de webhook no Redis") from exc
        logger.debug("replay_record_released", extra={"key": _mask(identifier)})
