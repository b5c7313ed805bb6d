"""Redis cache for AI comparison summaries.

Entries are keyed by a fingerprint of what was compared (the listings and the
mortgage terms), so an unchanged comparison set is summarized once per TTL.
Redis outages degrade to uncached calls; failed calls are never stored.
"""

import functools
import hashlib
import json
import logging
from typing import Any, Awaitable, Callable

import redis.asyncio as redis
from redis.exceptions import RedisError

from listiq.config import settings

logger = logging.getLogger(__name__)

_redis_client: redis.Redis | None = None


async def get_redis() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(settings.redis_url, decode_responses=True)
    return _redis_client


def cache_key(prefix: str, fingerprint: str) -> str:
    digest = hashlib.sha256(fingerprint.encode()).hexdigest()[:16]
    return f"listiq:{prefix}:{digest}"


async def _lookup(key: str) -> dict | None:
    try:
        r = await get_redis()
        hit = await r.get(key)
    except (RedisError, OSError):
        logger.warning("Redis unavailable, summarizing without cache")
        return None
    if hit is None:
        return None
    logger.debug("Cache hit: %s", key)
    return json.loads(hit)


async def _store(key: str, value: dict, ttl_seconds: int) -> None:
    try:
        r = await get_redis()
        await r.setex(key, ttl_seconds, json.dumps(value, default=str))
    except (RedisError, OSError):
        logger.warning("Failed to write cache for %s", key)


def cached_by(prefix: str, fingerprint: Callable[..., str], ttl_seconds: int = 3600):
    """Cache an async method's dict result under ``fingerprint(*args, **kwargs)``.

    ``fingerprint`` receives exactly the arguments of the wrapped call (including
    ``self``) and must return a stable string describing its inputs.
    """
    def decorator(func: Callable[..., Awaitable[dict]]) -> Callable[..., Awaitable[dict]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> dict:
            key = cache_key(prefix, fingerprint(*args, **kwargs))
            hit = await _lookup(key)
            if hit is not None:
                return hit
            result = await func(*args, **kwargs)
            await _store(key, result, ttl_seconds)
            return result
        return wrapper
    return decorator
