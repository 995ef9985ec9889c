"""Redis Rate Limit Store: janelas fixas com script Lua atômico.

Um único script lê todas as janelas do bucket, decide e só então
incrementa. Requisições limitadas não consomem saldo. A primeira
contagem de cada janela define seu PEXPIRE, que é o reset da janela.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.rate_limit_store import (
    RateLimitHit,
    RateLimitStoreProtocol,
    WindowLimit,
    WindowUsage,
)
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

RATE_LIMIT_PREFIX = "ratelimit:"

# KEYS[i]: contador da janela i
# ARGV[2i-1]: teto da janela i; ARGV[2i]: duração em ms
# Retorno: {limited, count_1, pttl_1, count_2, pttl_2, ...}
FIXED_WINDOW_LUA = """
local n = #KEYS
local counts = {}
local ttls = {}
local limited = 0
for i = 1, n do
  local count = tonumber(redis.call('GET', KEYS[i]) or '0')
  counts[i] = count
  ttls[i] = redis.call('PTTL', KEYS[i])
  if count + 1 > tonumber(ARGV[2 * i - 1]) then
    limited = 1
  end
end
if limited == 0 then
  for i = 1, n do
    counts[i] = redis.call('INCR', KEYS[i])
    if counts[i] == 1 or ttls[i] < 0 then
      redis.call('PEXPIRE', KEYS[i], ARGV[2 * i])
      ttls[i] = tonumber(ARGV[2 * i])
    end
  end
end
local result = {limited}
for i = 1, n do
  table.insert(result, counts[i])
  table.insert(result, ttls[i])
end
return result
"""


class RedisRateLimitStore(RateLimitStoreProtocol):
    """Store de rate limit usando Redis (cliente assíncrono).

    Args:
        redis_client: Cliente redis.asyncio
    """

    def __init__(self, redis_client: AsyncRedis) -> None:
        self._redis = redis_client
        self._script = redis_client.register_script(FIXED_WINDOW_LUA)

    def _keys(self, bucket_key: str, windows: Sequence[WindowLimit]) -> list[str]:
        return [f"{RATE_LIMIT_PREFIX}{bucket_key}:{w.name}" for w in windows]

    async def hit(self, bucket_key: str, windows: Sequence[WindowLimit]) -> RateLimitHit:
        args: list[int] = []
        for window in windows:
            args.extend((window.ceiling, window.seconds * 1000))

        try:
            result = await self._script(keys=self._keys(bucket_key, windows), args=args)
        except Exception as exc:
            raise RedisConnectionError("Falha ao executar script de rate limit no Redis") from exc

        limited = int(result[0]) == 1
        usages: list[WindowUsage] = []
        for index, window in enumerate(windows):
            count = int(result[1 + index * 2])
            pttl = int(result[2 + index * 2])
            # PTTL negativo: chave inexistente (janela ainda não aberta)
            reset_in = pttl / 1000 if pttl > 0 else float(window.seconds)
            usages.append(
                WindowUsage(
                    name=window.name,
                    count=count,
                    ceiling=window.ceiling,
                    reset_in_seconds=reset_in,
                )
            )

        return RateLimitHit(allowed=not limited, windows=tuple(usages))
