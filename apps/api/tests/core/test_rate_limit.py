"""
Tests for role-based rate limiting.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from starlette.requests import Request

from classroom.core import rate_limit
from classroom.core.rate_limit import (
    RateLimitExceeded,
    RequestRole,
    check_rate_limit,
    enforce_role_rate_limit,
    get_role_limit,
    resolve_role,
)


def make_request(role: str | None = None, host: str = "10.0.0.7") -> Request:
    headers = [(b"x-user-role", role.encode())] if role is not None else []
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/api/v1/classes",
            "headers": headers,
            "client": (host, 52114),
        }
    )


@pytest.fixture(autouse=True)
def clear_memory_store():
    rate_limit._memory_store.clear()
    yield
    rate_limit._memory_store.clear()


@pytest.fixture
def no_redis():
    with patch("classroom.core.redis.redis_client", None):
        yield


@pytest.fixture
def live_settings():
    """Settings with rate limiting switched on and small budgets."""
    fake = MagicMock(
        is_test=False,
        rate_limit_enabled=True,
        rate_limit_window_seconds=60,
        rate_limit_admin=5,
        rate_limit_teacher=3,
        rate_limit_student=2,
    )
    with patch("classroom.core.rate_limit.settings", fake):
        yield fake


class TestResolveRole:
    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("admin", RequestRole.ADMIN),
            (" Teacher ", RequestRole.TEACHER),
            ("student", RequestRole.STUDENT),
            ("principal", RequestRole.STUDENT),
            (None, RequestRole.STUDENT),
        ],
    )
    def test_resolve_role(self, header, expected):
        assert resolve_role(make_request(header)) == expected

    def test_default_limits(self):
        assert get_role_limit(RequestRole.ADMIN) == 200
        assert get_role_limit(RequestRole.TEACHER) == 100
        assert get_role_limit(RequestRole.STUDENT) == 50


class TestCheckRateLimit:
    @pytest.mark.asyncio
    async def test_memory_window(self, no_redis):
        assert await check_rate_limit("rate_limit:student:10.0.0.7", 2, 60)
        assert await check_rate_limit("rate_limit:student:10.0.0.7", 2, 60)
        assert not await check_rate_limit("rate_limit:student:10.0.0.7", 2, 60)
        # Other callers have their own window
        assert await check_rate_limit("rate_limit:student:10.0.0.8", 2, 60)

    @pytest.mark.asyncio
    async def test_redis_window(self):
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[0, 3, 1, True])
        client = MagicMock()
        client.pipeline.return_value = pipe

        with patch("classroom.core.redis.redis_client", client):
            assert not await check_rate_limit("rate_limit:teacher:10.0.0.7", 3, 60)

        pipe.zcard.assert_called_once_with("rate_limit:teacher:10.0.0.7")
        pipe.expire.assert_called_once_with("rate_limit:teacher:10.0.0.7", 60)
        assert rate_limit._memory_store == {}

    @pytest.mark.asyncio
    async def test_redis_failure_falls_back_to_memory(self):
        client = MagicMock()
        client.pipeline.side_effect = ConnectionError("redis went away")

        with patch("classroom.core.redis.redis_client", client):
            assert await check_rate_limit("rate_limit:admin:10.0.0.7", 1, 60)

        assert len(rate_limit._memory_store["rate_limit:admin:10.0.0.7"]) == 1


class TestEnforceRoleRateLimit:
    @pytest.mark.asyncio
    async def test_skipped_in_test_environment(self, no_redis):
        for _ in range(100):
            await enforce_role_rate_limit(make_request("student"))

        assert rate_limit._memory_store == {}

    @pytest.mark.asyncio
    async def test_student_budget_exhausted(self, no_redis, live_settings):
        request = make_request("student")
        await enforce_role_rate_limit(request)
        await enforce_role_rate_limit(request)

        with pytest.raises(RateLimitExceeded) as exc_info:
            await enforce_role_rate_limit(request)

        assert exc_info.value.status_code == 429
        assert exc_info.value.headers["Retry-After"] == "60"
        assert exc_info.value.detail["error"] == "RATE_LIMIT_EXCEEDED"
        assert "Guest request limit exceeded (2 per minute)" in exc_info.value.detail["message"]

    @pytest.mark.asyncio
    async def test_roles_are_counted_separately(self, no_redis, live_settings):
        for _ in range(3):
            await enforce_role_rate_limit(make_request("teacher"))

        # Same address, different role bucket
        await enforce_role_rate_limit(make_request("admin"))

        with pytest.raises(RateLimitExceeded):
            await enforce_role_rate_limit(make_request("teacher"))

    @pytest.mark.asyncio
    async def test_disabled_by_setting(self, no_redis, live_settings):
        live_settings.rate_limit_enabled = False

        for _ in range(10):
            await enforce_role_rate_limit(make_request("student"))

        assert rate_limit._memory_store == {}
