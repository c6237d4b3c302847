from abc import ABC, abstractmethod
from typing import Any, Optional


class Cache(ABC):
    """Key/value cache with TTLs, also used for unique-job locks"""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get a value, None when missing or expired"""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store a JSON-serialisable value"""
        pass

    @abstractmethod
    async def add(self, key: str, value: Any, ttl: int) -> bool:
        """Store only if the key is absent (atomic); True if stored"""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key; True if it existed"""
        pass

    @abstractmethod
    async def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with prefix; returns keys deleted"""
        pass

    async def close(self) -> None:
        """Release backend connections"""
        pass
