"""Shared ``redis.asyncio`` client for the listing cache and the revocation list."""

from __future__ import annotations

import redis.asyncio as redis

from dashboard.core.config import get_settings

_client: redis.Redis | None = None


async def get_redis() -> redis.Redis:
    """Return the process-wide client, creating it on first use."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=settings.redis_socket_timeout_seconds,
        )
    return _client


async def close_redis() -> None:
    """Close the client and its pool; the next ``get_redis`` reconnects."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
