"""diskcache-backed implementation of CacheStore."""

from __future__ import annotations

import asyncio
import pickle
import sqlite3
from pathlib import Path
from typing import Any

import diskcache
import structlog

from transient_core.constants import DEFAULT_MAX_KEY_LENGTH, NO_EXPIRY
from transient_core.exceptions import CacheOperationError
from transient_core.keys import namespace_prefix

logger = structlog.get_logger()

_MISSING = object()

# Lock timeouts, SQLite and filesystem faults, and (un)pickling failures of values
_DISK_ERRORS = (
    diskcache.Timeout,
    sqlite3.Error,
    OSError,
    pickle.PicklingError,
    pickle.UnpicklingError,
    EOFError,
    TypeError,
    AttributeError,
)


class DiskCacheStore:
    """Persistent store backed by diskcache (SQLite under the hood)."""

    def __init__(self, cache_dir: Path, max_key_length: int = DEFAULT_MAX_KEY_LENGTH) -> None:
        """Initialize with a cache directory."""
        cache_dir.mkdir(parents=True, exist_ok=True)
        self.max_key_length = max_key_length
        self._cache = diskcache.Cache(str(cache_dir))

    async def _run(
        self, operation: str, key: str | None, func: Any, *args: Any, **kwargs: Any
    ) -> Any:
        """Run a blocking diskcache call in a thread, mapping its failures."""
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except _DISK_ERRORS as e:
            logger.warning(
                "store_operation_failed",
                backend="disk",
                operation=operation,
                key=key,
                error=str(e),
            )
            raise CacheOperationError(operation, key, str(e)) from e

    async def get(self, key: str) -> tuple[Any, bool]:
        """Retrieve ``(value, found)``."""
        value = await self._run("get", key, self._cache.get, key, default=_MISSING)
        if value is _MISSING:
            return None, False
        return value, True

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """Store a value with TTL."""
        expire = None if ttl_seconds == NO_EXPIRY else ttl_seconds
        return bool(await self._run("set", key, self._cache.set, key, value, expire=expire))

    async def delete(self, key: str) -> bool:
        """Delete a key from the store."""
        await self._run("delete", key, self._cache.delete, key)
        return True

    async def exists(self, key: str) -> bool:
        """Check if a live entry exists."""
        _, found = await self.get(key)
        return found

    async def clear_namespace(self, namespace: str) -> bool:
        """Delete every key carrying the namespace prefix."""
        prefix = namespace_prefix(namespace)

        def _clear() -> int:
            keys = [
                k for k in self._cache.iterkeys() if isinstance(k, str) and k.startswith(prefix)
            ]
            for k in keys:
                self._cache.delete(k)
            return len(keys)

        removed = await self._run("clear_namespace", None, _clear)
        logger.info("store_namespace_cleared", backend="disk", namespace=namespace, removed=removed)
        return True

    def close(self) -> None:
        """Close the cache."""
        self._cache.close()

    async def aclose(self) -> None:
        """Close the cache from async code."""
        self.close()
