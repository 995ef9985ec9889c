"""Testes do RateLimiter (tetos por classe, fail open/closed)."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.infra.stores import MemoryRateLimitStore
from app.protocols.rate_limit_store import RateLimitHit, WindowUsage
from app.services.rate_limiter import RateLimiter
from config.settings import DEFAULT_LIMITER_CEILINGS, LimiterCeilings
from utils.errors import BackendUnavailableError, RedisConnectionError


def _limiter(**kwargs) -> RateLimiter:
    return RateLimiter(MemoryRateLimitStore(), DEFAULT_LIMITER_CEILINGS, **kwargs)


class TestRateLimiter:
    @pytest.mark.asyncio
    async def test_nth_request_allowed_and_next_limited(self) -> None:
        limiter = _limiter()

        decisions = [await limiter.check("login", "ip:203.0.113.7") for _ in range(6)]

        assert all(d.allowed for d in decisions[:5])
        assert decisions[4].remaining == 0
        sixth = decisions[5]
        assert sixth.limited is True
        assert 0 < sixth.retry_after_seconds <= 60

    @pytest.mark.asyncio
    async def test_remaining_counts_down(self) -> None:
        limiter = _limiter()

        first = await limiter.check("api", "user:7")
        second = await limiter.check("api", "user:7")

        assert first.limit == 60
        assert first.remaining == 59
        assert second.remaining == 58
        assert second.headers() == {"X-RateLimit-Limit": "60", "X-RateLimit-Remaining": "58"}

    @pytest.mark.asyncio
    async def test_classes_are_independent(self) -> None:
        limiter = _limiter()
        for _ in range(5):
            await limiter.check("login", "ip:1.1.1.1")

        assert (await limiter.check("login", "ip:1.1.1.1")).limited is True
        assert (await limiter.check("api", "ip:1.1.1.1")).allowed is True
        assert (await limiter.check("webhook", "ip:1.1.1.1")).allowed is True

    @pytest.mark.asyncio
    async def test_identities_are_independent(self) -> None:
        limiter = _limiter()
        for _ in range(5):
            await limiter.check("lgpd", "user:1")

        assert (await limiter.check("lgpd", "user:2")).allowed is True

    @pytest.mark.asyncio
    async def test_unknown_class_is_programming_error(self) -> None:
        with pytest.raises(ValueError, match="desconhecida"):
            await _limiter().check("unknown", "ip:1.1.1.1")

    def test_windows_for_uses_configured_ceilings(self) -> None:
        limiter = RateLimiter(
            MemoryRateLimitStore(), {"custom": LimiterCeilings(per_minute=2, per_hour=10)}
        )

        minute, hour = limiter.windows_for("custom")

        assert (minute.seconds, minute.ceiling) == (60, 2)
        assert (hour.seconds, hour.ceiling) == (3600, 10)
        assert limiter.limiter_classes == frozenset({"custom"})

    @pytest.mark.asyncio
    async def test_retry_after_uses_longest_exhausted_window(self) -> None:
        store = MagicMock()
        store.hit = AsyncMock(
            return_value=RateLimitHit(
                allowed=False,
                windows=(
                    WindowUsage(name="minute", count=5, ceiling=5, reset_in_seconds=12.2),
                    WindowUsage(name="hour", count=20, ceiling=20, reset_in_seconds=1800.1),
                ),
            )
        )
        limiter = RateLimiter(store, DEFAULT_LIMITER_CEILINGS)

        decision = await limiter.check("login", "ip:1.1.1.1")

        assert decision.retry_after_seconds == 1801
        assert decision.remaining == 0

    @pytest.mark.asyncio
    async def test_concurrent_checks_allow_exactly_ceiling(self) -> None:
        limiter = _limiter()

        decisions = await asyncio.gather(
            *(limiter.check("login", "ip:203.0.113.7") for _ in range(10))
        )

        assert sum(d.allowed for d in decisions) == 5
        assert all(d.retry_after_seconds >= 1 for d in decisions if d.limited)


class TestRateLimiterFailModes:
    @pytest.mark.asyncio
    async def test_fail_open_allows_and_logs_fallback(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        store = MagicMock()
        store.hit = AsyncMock(side_effect=RedisConnectionError("down"))
        limiter = RateLimiter(store, DEFAULT_LIMITER_CEILINGS, fail_mode="open")

        with caplog.at_level(logging.WARNING):
            decision = await limiter.check("api", "user:1")

        assert decision.allowed is True
        assert decision.limit == 60
        assert any(r.getMessage() == "fallback_applied" for r in caplog.records)

    @pytest.mark.asyncio
    async def test_fail_closed_raises_backend_unavailable(self) -> None:
        store = MagicMock()
        store.hit = AsyncMock(side_effect=RedisConnectionError("down"))
        limiter = RateLimiter(store, DEFAULT_LIMITER_CEILINGS, fail_mode="closed")

        with pytest.raises(BackendUnavailableError) as exc_info:
            await limiter.check("api", "user:1")

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_timeout_counts_as_store_failure(self) -> None:
        async def _slow_hit(*_args, **_kwargs):
            await asyncio.sleep(1)

        store = MagicMock()
        store.hit = _slow_hit
        limiter = RateLimiter(
            store, DEFAULT_LIMITER_CEILINGS, fail_mode="closed", timeout_seconds=0.01
        )

        with pytest.raises(BackendUnavailableError):
            await limiter.check("api", "user:1")
