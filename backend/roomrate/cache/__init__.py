"""
Key-value cache with per-entry TTL.
Two interchangeable backends: in-process and Redis.
"""
from roomrate.cache.base import Cache
from roomrate.cache.memory_cache import MemoryCache
from roomrate.cache.redis_cache import RedisCache
from roomrate.config import Settings


def get_cache(settings: Settings) -> Cache:
    """Build the cache backend selected by CACHE_BACKEND."""
    if settings.cache_backend == "redis":
        return RedisCache(settings.redis_url)
    if settings.cache_backend == "memory":
        return MemoryCache()
    raise ValueError(f"Unknown cache backend: {settings.cache_backend}")


__all__ = ["Cache", "MemoryCache", "RedisCache", "get_cache"]
