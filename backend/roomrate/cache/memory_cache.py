"""In-process cache backed by a dict and per-key expiry timers."""
import asyncio
import copy
import logging
from typing import Any, Dict, Optional, Tuple

from roomrate.cache.base import Cache
from roomrate.clock import SystemClock

logger = logging.getLogger(__name__)


class MemoryCache(Cache):
    """
    Entries are removed by an event-loop timer when their TTL runs out.
    Each entry also carries its deadline, so get() never returns an expired
    value even when no timer could be scheduled (no running loop) or the
    clock is driven by hand.
    """

    def __init__(self, clock=None):
        self._clock = clock or SystemClock()
        self._entries: Dict[str, Tuple[Dict[str, Any], Optional[float]]] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock.timestamp() >= expires_at:
            self._remove(key)
            return None
        return copy.deepcopy(value)

    async def set(self, key: str, value: Dict[str, Any], ttl_seconds: int = 300) -> None:
        self._cancel_timer(key)
        expires_at = None
        if ttl_seconds > 0:
            expires_at = self._clock.timestamp() + ttl_seconds
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None
            if loop is not None:
                self._timers[key] = loop.call_later(ttl_seconds, self._expire, key)
        self._entries[key] = (copy.deepcopy(value), expires_at)

    async def delete(self, key: str) -> None:
        self._remove(key)

    async def close(self) -> None:
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        self._entries.clear()

    def _expire(self, key: str) -> None:
        self._timers.pop(key, None)
        self._entries.pop(key, None)
        logger.debug(f"Cache entry expired: {key}")

    def _remove(self, key: str) -> None:
        self._cancel_timer(key)
        self._entries.pop(key, None)

    def _cancel_timer(self, key: str) -> None:
        handle = self._timers.pop(key, None)
        if handle is not None:
            handle.cancel()
