"""Factories de clientes externos.

O Redis é o único backend compartilhado: contadores de rate limit e
registros de replay vivem nele para valer entre instâncias.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from config.settings import get_base_settings

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def create_async_redis_client() -> AsyncRedis:
    """Cria cliente Redis assíncrono (singleton).

    Timeouts de socket curtos: o orçamento por chamada é aplicado pelos
    guards, aqui só evitamos conexões penduradas.

    Raises:
        ValueError: Se REDIS_URL não estiver configurado.
    """
    from redis.asyncio import Redis as AsyncRedis

    redis_url = get_base_settings().redis_url
    if not redis_url:
        msg = "REDIS_URL não configurado"
        raise ValueError(msg)

    client: AsyncRedis = AsyncRedis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=1.0,
        socket_connect_timeout=1.0,
    )

    logger.info("async_redis_client_created")
    return client
