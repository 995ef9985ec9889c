"""Stores: implementações concretas de estado compartilhado.

Módulos disponíveis:
    - redis_replay_store: Replay/idempotência de webhooks (SET NX EX)
    - redis_rate_limit_store: Buckets de rate limit (script Lua)
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.memory_stores import MemoryRateLimitStore, MemoryReplayStore
from app.infra.stores.redis_rate_limit_store import RedisRateLimitStore
from app.infra.stores.redis_replay_store import RedisReplayStore

__all__ = [
    # Memory (dev/test)
    "MemoryRateLimitStore",
    "MemoryReplayStore",
    # Redis
    "RedisRateLimitStore",
    "RedisReplayStore",
]
