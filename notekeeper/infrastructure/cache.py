"""
Кэш-слой: пространства имен ключей, TTL и поглощение ошибок кэша.

Слой ничего не знает о заметках: только непрозрачные ключи и
JSON-сериализуемые значения. Любой сбой кэша превращается в промах.
"""
import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600

CACHE_ERRORS = (RedisError, ConnectionError, TimeoutError, ValueError, TypeError)


class MemoryCache:
    """Кэш в памяти процесса с подмножеством интерфейса redis.asyncio.Redis"""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, ex: Optional[int] = None) -> bool:
        expires_at = self._clock() + ex if ex else None
        self._entries[key] = (value, expires_at)
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self._entries.pop(key, None) is not None:
                removed += 1
        return removed

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self._entries.clear()


class CacheLayer:
    """Пространства имен get/set/invalidate поверх key-value хранилища"""

    def __init__(self, client, prefix: str = "note", ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self.client = client
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds

    def key(self, namespace: str, entity_id: int) -> str:
        return f"{self.prefix}:{namespace}:{entity_id}"

    async def get(self, key: str) -> Optional[Any]:
        """Снимок по ключу; None при промахе или сбое кэша"""
        try:
            raw = await self.client.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except CACHE_ERRORS as exc:
            logger.warning("Cache get failed for %s, treating as miss: %s", key, exc)
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        try:
            payload = json.dumps(value)
            await self.client.set(key, payload, ex=ttl or self.ttl_seconds)
        except CACHE_ERRORS as exc:
            logger.warning("Cache set failed for %s: %s", key, exc)

    async def invalidate(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except CACHE_ERRORS as exc:
            logger.warning("Cache invalidate failed for %s: %s", key, exc)

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except CACHE_ERRORS as exc:
            logger.warning("Cache ping failed: %s", exc)
            return False

    async def close(self) -> None:
        await self.client.aclose()

    @property
    def backend(self) -> str:
        return "memory" if isinstance(self.client, MemoryCache) else "redis"


def build_cache_client(redis_url: str):
    """Redis-клиент по URL; без URL - кэш в памяти"""
    if not redis_url:
        logger.info("REDIS_URL is not set, using in-process memory cache")
        return MemoryCache()
    return redis.from_url(redis_url, socket_timeout=2, socket_connect_timeout=2)
