"""Redis-backed implementation of CacheStore."""

from __future__ import annotations

import re
from typing import Any

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from transient_core.constants import DEFAULT_MAX_KEY_LENGTH, NO_EXPIRY
from transient_core.exceptions import CacheOperationError
from transient_core.keys import namespace_prefix
from transient_infra.stores.codec import decode, encode

logger = structlog.get_logger()

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def escape_glob(text: str) -> str:
    """Escape Redis glob metacharacters so ``text`` matches literally."""
    return _GLOB_SPECIAL.sub(r"\\\1", text)


class RedisStore:
    """Persistent store backed by Redis. Values are stored pickled.

    The client must return raw bytes (the redis-py default, ``decode_responses=False``).
    """

    def __init__(
        self,
        redis: Redis,  # type: ignore[type-arg]
        max_key_length: int = DEFAULT_MAX_KEY_LENGTH,
        scan_count: int = 500,
    ) -> None:
        """Initialize with a redis-py asyncio client."""
        self._redis = redis
        self.max_key_length = max_key_length
        self._scan_count = scan_count

    def _failed(self, operation: str, key: str | None, error: Exception) -> CacheOperationError:
        logger.warning(
            "store_operation_failed",
            backend="redis",
            operation=operation,
            key=key,
            error=str(error),
        )
        return CacheOperationError(operation, key, str(error))

    async def get(self, key: str) -> tuple[Any, bool]:
        """Retrieve ``(value, found)``."""
        try:
            raw = await self._redis.get(key)
        except RedisError as e:
            raise self._failed("get", key, e) from e
        if raw is None:
            return None, False
        return decode(raw, key), True

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """Store a value with TTL."""
        payload = encode(value, key)
        ex = None if ttl_seconds == NO_EXPIRY else ttl_seconds
        try:
            result = await self._redis.set(name=key, value=payload, ex=ex)
        except RedisError as e:
            raise self._failed("set", key, e) from e
        return bool(result)

    async def delete(self, key: str) -> bool:
        """Delete a key from the store."""
        try:
            await self._redis.delete(key)
        except RedisError as e:
            raise self._failed("delete", key, e) from e
        return True

    async def exists(self, key: str) -> bool:
        """Check if a key exists."""
        try:
            count = await self._redis.exists(key)
        except RedisError as e:
            raise self._failed("exists", key, e) from e
        return bool(count)

    async def clear_namespace(self, namespace: str) -> bool:
        """Delete every key matching the namespace prefix, via SCAN."""
        pattern = f"{escape_glob(namespace_prefix(namespace))}*"
        removed = 0
        try:
            batch: list[Any] = []
            async for key in self._redis.scan_iter(match=pattern, count=self._scan_count):
                batch.append(key)
                if len(batch) >= self._scan_count:
                    removed += await self._redis.delete(*batch)
                    batch = []
            if batch:
                removed += await self._redis.delete(*batch)
        except RedisError as e:
            raise self._failed("clear_namespace", None, e) from e
        logger.info(
            "store_namespace_cleared", backend="redis", namespace=namespace, removed=removed
        )
        return True

    async def aclose(self) -> None:
        """Close the Redis connection pool."""
        await self._redis.aclose()
