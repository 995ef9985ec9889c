"""Stores em memória para desenvolvimento e testes.

Não compartilham estado entre processos: proibidos fora de development
(ver validate_runtime_settings). Cada operação roda inteira sob um
threading.Lock, sem await dentro da seção crítica.
"""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING

from app.domain.security import ReplayStatus
from app.protocols.rate_limit_store import (
    RateLimitHit,
    RateLimitStoreProtocol,
    WindowLimit,
    WindowUsage,
)
from app.protocols.replay_store import ReplayStoreProtocol

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


class MemoryReplayStore(ReplayStoreProtocol):
    """Store de replay em memória: identifier -> expires_at."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._store: dict[str, float] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def _cleanup_expired(self, now: float) -> None:
        """Remove entradas expiradas (chamar com lock adquirido)."""
        expired = [k for k, v in self._store.items() if v <= now]
        for k in expired:
            del self._store[k]

    async def check_and_record(self, identifier: str, ttl: int) -> ReplayStatus:
        with self._lock:
            now = self._clock()
            self._cleanup_expired(now)
            if identifier in self._store:
                return ReplayStatus.DUPLICATE
            self._store[identifier] = now + ttl
            return ReplayStatus.FRESH

    async def release(self, identifier: str) -> None:
        with self._lock:
            self._store.pop(identifier, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


class _Window:
    __slots__ = ("count", "ends_at", "started_at")

    def __init__(self, started_at: float, seconds: int) -> None:
        self.count = 0
        self.started_at = started_at
        self.ends_at = started_at + seconds


class MemoryRateLimitStore(RateLimitStoreProtocol):
    """Buckets de janela fixa em memória.

    A janela começa no primeiro hit do bucket e reinicia quando
    `now >= started_at + seconds`.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._buckets: dict[str, dict[str, _Window]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def _cleanup_expired(self, now: float) -> None:
        """Remove buckets com todas as janelas encerradas (chamar com lock adquirido)."""
        expired = [
            key
            for key, bucket in self._buckets.items()
            if all(now >= window.ends_at for window in bucket.values())
        ]
        for key in expired:
            del self._buckets[key]

    async def hit(self, bucket_key: str, windows: Sequence[WindowLimit]) -> RateLimitHit:
        with self._lock:
            now = self._clock()
            self._cleanup_expired(now)
            bucket = self._buckets.setdefault(bucket_key, {})

            states: list[tuple[WindowLimit, _Window]] = []
            for limit in windows:
                window = bucket.get(limit.name)
                if window is None or now >= window.started_at + limit.seconds:
                    window = _Window(started_at=now, seconds=limit.seconds)
                    bucket[limit.name] = window
                states.append((limit, window))

            allowed = all(window.count + 1 <= limit.ceiling for limit, window in states)
            if allowed:
                for _, window in states:
                    window.count += 1

            return RateLimitHit(
                allowed=allowed,
                windows=tuple(
                    WindowUsage(
                        name=limit.name,
                        count=window.count,
                        ceiling=limit.ceiling,
                        reset_in_seconds=window.started_at + limit.seconds - now,
                    )
                    for limit, window in states
                ),
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def reset(self) -> None:
        """Zera todos os buckets (apenas para testes)."""
        with self._lock:
            self._buckets.clear()
