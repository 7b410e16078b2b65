"""
Rate Limiting Module

Role-based request rate limiting for the API, backed by Redis.
Falls back to in-memory storage if Redis is unavailable.

Each caller gets a sliding window per role:
- admin: 200 requests per minute
- teacher: 100 requests per minute
- student (and unknown roles): 50 requests per minute

The role is read from the X-User-Role request header. Rate limiting is
skipped entirely in the test environment or when RATE_LIMIT_ENABLED=false.
"""

import logging
import time
from enum import Enum

from fastapi import HTTPException, Request, status

from classroom.core import redis as redis_state
from classroom.core.config import settings

logger = logging.getLogger(__name__)

ROLE_HEADER = "x-user-role"

# In-memory rate limit storage (fallback when Redis unavailable)
# Format: {key: [timestamp, ...]}
_memory_store: dict[str, list[float]] = {}


class RequestRole(str, Enum):
    """Roles recognised by the rate limiter."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


ROLE_LIMIT_MESSAGES: dict[RequestRole, str] = {
    RequestRole.ADMIN: "Admin request limit exceeded ({limit} per minute). Slow down!",
    RequestRole.TEACHER: "Teacher request limit exceeded ({limit} per minute). Please wait.",
    RequestRole.STUDENT: (
        "Guest request limit exceeded ({limit} per minute). Sign up for higher limits."
    ),
}


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int, message: str | None = None):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": message
                or f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


def resolve_role(request: Request) -> RequestRole:
    """
    Resolve the caller's role from the request headers.

    Missing or unrecognised roles are treated as student, the most
    restrictive tier.
    """
    raw_role = request.headers.get(ROLE_HEADER, "").strip().lower()
    try:
        return RequestRole(raw_role)
    except ValueError:
        return RequestRole.STUDENT


def get_role_limit(role: RequestRole) -> int:
    """Maximum requests per window for a role."""
    limits = {
        RequestRole.ADMIN: settings.rate_limit_admin,
        RequestRole.TEACHER: settings.rate_limit_teacher,
        RequestRole.STUDENT: settings.rate_limit_student,
    }
    return limits[role]


async def _check_rate_limit_redis(
    client,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using Redis.

    Uses a sliding window algorithm with Redis sorted sets.

    Args:
        client: Redis client
        key: Rate limit key (e.g., "rate_limit:teacher:10.0.0.1")
        limit: Maximum requests allowed
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    now = time.time()
    window_start = now - window_seconds

    # Use a pipeline for atomic operations
    pipe = client.pipeline()

    # Remove old entries outside the window
    pipe.zremrangebyscore(key, 0, window_start)

    # Count current requests in window
    pipe.zcard(key)

    # Add current request
    pipe.zadd(key, {str(now): now})

    # Set expiry on the key
    pipe.expire(key, window_seconds)

    results = await pipe.execute()
    current_count = results[1]

    return current_count < limit


async def _check_rate_limit_memory(
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using in-memory storage.

    Fallback when Redis is unavailable. Note: This doesn't work
    across multiple server instances.

    Args:
        key: Rate limit key
        limit: Maximum requests allowed
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    now = time.time()
    window_start = now - window_seconds

    # Drop entries outside the window
    timestamps = [ts for ts in _memory_store.get(key, []) if ts > window_start]

    if len(timestamps) >= limit:
        _memory_store[key] = timestamps
        return False

    timestamps.append(now)
    _memory_store[key] = timestamps
    return True


async def check_rate_limit(
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check if a request is within rate limits.

    Tries the shared Redis client first, falls back to in-memory storage.

    Args:
        key: Unique key for this rate limit
        limit: Maximum requests allowed in the window
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    client = redis_state.redis_client

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return await _check_rate_limit_memory(key, limit, window_seconds)


def _rate_limit_key(request: Request, role: RequestRole) -> str:
    client_ip = request.client.host if request.client else "unknown"
    return f"rate_limit:{role.value}:{client_ip}"


async def enforce_role_rate_limit(request: Request) -> None:
    """
    FastAPI dependency applying the role-based rate limit.

    Usage:
        app.include_router(api_router, dependencies=[Depends(enforce_role_rate_limit)])

    Raises:
        RateLimitExceeded: When the caller's role budget is spent (HTTP 429)
    """
    if settings.is_test or not settings.rate_limit_enabled:
        return

    role = resolve_role(request)
    limit = get_role_limit(role)
    window_seconds = settings.rate_limit_window_seconds
    key = _rate_limit_key(request, role)

    allowed = await check_rate_limit(key, limit, window_seconds)

    if not allowed:
        logger.warning(f"Rate limit exceeded for {key}: {limit}/{window_seconds}s")
        raise RateLimitExceeded(
            limit,
            window_seconds,
            message=ROLE_LIMIT_MESSAGES[role].format(limit=limit),
        )


__all__ = [
    "RequestRole",
    "RateLimitExceeded",
    "check_rate_limit",
    "enforce_role_rate_limit",
    "get_role_limit",
    "resolve_role",
]
