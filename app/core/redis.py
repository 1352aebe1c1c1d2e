"""Redis client, used for the session revocation list."""

from __future__ import annotations

from typing import Optional

import redis.asyncio as redis

from app.core.config import get_settings

_client: Optional[redis.Redis] = None


async def get_redis() -> redis.Redis:
    """Shared client, created on first use."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=settings.redis_connect_timeout,
            health_check_interval=30,
        )
    return _client


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
