"""
Cache backends.

InMemoryCache serves a single process (tests, sync queue mode);
RedisCache shares locks and cached permission maps between workers.
"""

import asyncio
import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

from redis.asyncio import Redis

from src.app.services.cache import Cache

logger = logging.getLogger(__name__)


class InMemoryCache(Cache):
    """Process-local cache with monotonic-clock expiry"""

    def __init__(self):
        self._data: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._lock = asyncio.Lock()

    def _alive(self, key: str) -> bool:
        entry = self._data.get(key)
        if entry is None:
            return False
        expires_at = entry[1]
        if expires_at is not None and expires_at <= time.monotonic():
            del self._data[key]
            return False
        return True

    @staticmethod
    def _expiry(ttl: Optional[int]) -> Optional[float]:
        return time.monotonic() + ttl if ttl else None

    async def get(self, key: str) -> Optional[Any]:
        if not self._alive(key):
            return None
        return self._data[key][0]

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self._data[key] = (value, self._expiry(ttl))

    async def add(self, key: str, value: Any, ttl: int) -> bool:
        async with self._lock:
            if self._alive(key):
                return False
            self._data[key] = (value, self._expiry(ttl))
            return True

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def delete_prefix(self, prefix: str) -> int:
        keys = [k for k in self._data if k.startswith(prefix)]
        for key in keys:
            del self._data[key]
        return len(keys)


class RedisCache(Cache):
    """Redis-backed cache; values are stored as JSON under a key prefix"""

    def __init__(self, client: Redis, prefix: str = "tenancy"):
        self.client = client
        self.prefix = prefix

    def _make_key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        raw = await self.client.get(self._make_key(key))
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        await self.client.set(self._make_key(key), json.dumps(value), ex=ttl or None)

    async def add(self, key: str, value: Any, ttl: int) -> bool:
        stored = await self.client.set(self._make_key(key), json.dumps(value), ex=ttl, nx=True)
        return bool(stored)

    async def delete(self, key: str) -> bool:
        return bool(await self.client.delete(self._make_key(key)))

    async def delete_prefix(self, prefix: str) -> int:
        deleted = 0
        async for redis_key in self.client.scan_iter(match=f"{self._make_key(prefix)}*"):
            deleted += await self.client.delete(redis_key)
        return deleted

    async def close(self) -> None:
        await self.client.aclose()


def build_cache(config) -> Cache:
    """Create the cache backend selected by CACHE_BACKEND"""
    backend = config.CACHE_BACKEND
    if backend == "memory":
        return InMemoryCache()
    if backend == "redis":
        client = Redis.from_url(config.REDIS_URL, decode_responses=True)
        return RedisCache(client, prefix=config.CACHE_PREFIX)
    raise ValueError(f"Unsupported CACHE_BACKEND: {backend}")
