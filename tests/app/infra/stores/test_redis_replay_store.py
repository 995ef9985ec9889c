"""Testes do RedisReplayStore com mock."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domain.security import ReplayStatus
from app.infra.stores.redis_replay_store import RedisReplayStore
from utils.errors import RedisConnectionError


class TestRedisReplayStore:
    @pytest.mark.asyncio
    async def test_fresh_when_set_nx_creates_key(self) -> None:
        """SET NX retornando True significa primeira entrega."""
        mock_redis = MagicMock()
        mock_redis.set = AsyncMock(return_value=True)
        store = RedisReplayStore(mock_redis)

        result = await store.check_and_record("message_created:1:123", ttl=86400)

        assert result == ReplayStatus.FRESH
        call = mock_redis.set.await_args
        assert call.args[0] == "webhook_processed:message_created:1:123"
        assert call.kwargs == {"nx": True, "ex": 86400}

    @pytest.mark.asyncio
    async def test_duplicate_when_key_exists(self) -> None:
        mock_redis = MagicMock()
        mock_redis.set = AsyncMock(return_value=None)
        store = RedisReplayStore(mock_redis)

        assert await store.check_and_record("evt-123", ttl=60) == ReplayStatus.DUPLICATE

    @pytest.mark.asyncio
    async def test_wraps_client_errors(self) -> None:
        mock_redis = MagicMock()
        mock_redis.set = AsyncMock(side_effect=ConnectionError("down"))
        store = RedisReplayStore(mock_redis)

        with pytest.raises(RedisConnectionError):
            await store.check_and_record("evt-123", ttl=60)

    @pytest.mark.asyncio
    async def test_release_deletes_key(self) -> None:
        mock_redis = MagicMock()
        mock_redis.delete = AsyncMock(return_value=1)
        store = RedisReplayStore(mock_redis)

        await store.release("evt-123")

        mock_redis.delete.assert_awaited_once_with("webhook_processed:evt-123")
