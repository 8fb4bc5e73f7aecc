"""
Redis-backed cache for task listings, invalidated by tag.

Every tag carries a generation counter. Readers take the generation before
querying and store their result under it; writers call
``invalidate(org_tag(org_id), task_tag(task_id))`` after their commit, which
bumps the counter. A fill computed before a write therefore lands under a
generation nobody reads any more and simply expires.

Cache failures never raise: they are logged and the caller falls back to the
store.
"""

from __future__ import annotations

import json
import uuid
from typing import Any, Optional, Protocol

import redis.asyncio as redis
import structlog

from dashboard.core.config import get_settings
from dashboard.core.redis import get_redis

log = structlog.get_logger()

CACHE_PREFIX = "dash:cache"
CACHE_KEY_SEP = ":"


def org_tag(org_id: uuid.UUID) -> str:
    """Tag for every task listing of one organization."""
    return f"org{CACHE_KEY_SEP}{org_id}"


def task_tag(task_id: uuid.UUID) -> str:
    """Tag for views of a single task."""
    return f"task{CACHE_KEY_SEP}{task_id}"


def tag_key(tag: str, generation: int = 0) -> str:
    return f"{CACHE_PREFIX}{CACHE_KEY_SEP}{tag}{CACHE_KEY_SEP}v{generation}"


def generation_key(tag: str) -> str:
    return f"{CACHE_PREFIX}{CACHE_KEY_SEP}gen{CACHE_KEY_SEP}{tag}"


class TaskCache(Protocol):
    """What the task controller needs from a cache backend."""

    async def generation(self, tag: str) -> Optional[int]:
        """Current generation of ``tag``, or None when the cache is unusable."""
        ...

    async def get(self, tag: str, generation: int) -> Any | None:
        ...

    async def set(self, tag: str, generation: int, value: Any) -> None:
        ...

    async def invalidate(self, *tags: str) -> None:
        ...


class RedisTaskCache:
    """TaskCache on top of a ``redis.asyncio`` client, JSON encoded."""

    def __init__(self, client: redis.Redis, ttl_seconds: int = 300):
        self.client = client
        self.ttl_seconds = ttl_seconds

    async def generation(self, tag: str) -> Optional[int]:
        try:
            raw = await self.client.get(generation_key(tag))
        except redis.RedisError as exc:
            log.warning("cache.generation_failed", tag=tag, error=str(exc))
            return None
        return int(raw) if raw is not None else 0

    async def get(self, tag: str, generation: int) -> Any | None:
        try:
            raw = await self.client.get(tag_key(tag, generation))
        except redis.RedisError as exc:
            log.warning("cache.get_failed", tag=tag, error=str(exc))
            return None
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, tag: str, generation: int, value: Any) -> None:
        try:
            await self.client.setex(
                tag_key(tag, generation), self.ttl_seconds, json.dumps(value)
            )
        except redis.RedisError as exc:
            log.warning("cache.set_failed", tag=tag, error=str(exc))

    async def invalidate(self, *tags: str) -> None:
        if not tags:
            return
        try:
            for tag in tags:
                await self.client.incr(generation_key(tag))
        except redis.RedisError as exc:
            log.warning("cache.invalidate_failed", tags=list(tags), error=str(exc))
            return
        log.debug("cache.invalidated", tags=list(tags))


async def get_task_cache() -> TaskCache:
    """FastAPI dependency: the Redis-backed listing cache."""
    settings = get_settings()
    return RedisTaskCache(await get_redis(), settings.task_list_cache_ttl_seconds)
