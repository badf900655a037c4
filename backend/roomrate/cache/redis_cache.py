"""Redis-backed cache. Values are stored as JSON text."""
import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as aioredis

from roomrate.cache.base import Cache

logger = logging.getLogger(__name__)


class RedisCache(Cache):
    """Same semantics as MemoryCache; the connection is opened on first use and reused."""

    def __init__(self, redis_url: str):
        self.redis_url = redis_url
        self._client: Optional[aioredis.Redis] = None

    async def _get_redis(self) -> aioredis.Redis:
        if self._client is None:
            self._client = aioredis.from_url(self.redis_url, decode_responses=True)
        return self._client

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        r = await self._get_redis()
        raw = await r.get(key)
        return json.loads(raw) if raw else None

    async def set(self, key: str, value: Dict[str, Any], ttl_seconds: int = 300) -> None:
        r = await self._get_redis()
        payload = json.dumps(value)
        if ttl_seconds > 0:
            await r.setex(key, ttl_seconds, payload)
        else:
            await r.set(key, payload)

    async def delete(self, key: str) -> None:
        r = await self._get_redis()
        await r.delete(key)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
