"""Cache contract shared by all backends."""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class Cache(ABC):
    """
    Async key-value store for JSON-serializable records.

    A ttl_seconds of zero or less means the entry never expires.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    async def set(self, key: str, value: Dict[str, Any], ttl_seconds: int = 300) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    async def close(self) -> None:
        """Release backend resources. No-op by default."""
