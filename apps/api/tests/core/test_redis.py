"""
Tests for the shared Redis client lifecycle.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

import classroom.core as core
from classroom.core import redis as core_redis


@pytest.fixture(autouse=True)
def reset_client():
    with patch.object(core_redis, "redis_client", None):
        yield


class TestRedisLifecycle:
    @pytest.mark.asyncio
    async def test_init_publishes_client_after_ping(self):
        client = MagicMock()
        client.ping = AsyncMock()
        with patch.object(core_redis, "from_url", return_value=client) as mock_from_url:
            assert await core_redis.init_redis() is client

        mock_from_url.assert_called_once()
        client.ping.assert_awaited_once()
        assert core_redis.redis_client is client

    @pytest.mark.asyncio
    async def test_unreachable_server_leaves_client_unset(self):
        client = MagicMock()
        client.ping = AsyncMock(side_effect=ConnectionError("refused"))
        with patch.object(core_redis, "from_url", return_value=client):
            with pytest.raises(ConnectionError):
                await core_redis.init_redis()

        assert core_redis.redis_client is None

    @pytest.mark.asyncio
    async def test_close_releases_client(self):
        client = MagicMock()
        client.aclose = AsyncMock()
        core_redis.redis_client = client

        await core_redis.close_redis()

        client.aclose.assert_awaited_once()
        assert core_redis.redis_client is None

    def test_lifecycle_is_the_whole_public_surface(self):
        assert not hasattr(core_redis, "get_redis")
        assert not hasattr(core_redis, "is_redis_available")
        assert "get_redis" not in core.__all__
