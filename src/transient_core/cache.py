"""Namespaced simple-cache facade over a CacheStore."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any

import structlog

from transient_core.constants import DEFAULT_TTL_SECONDS
from transient_core.exceptions import CacheOperationError, InvalidKeyError, InvalidTTLError
from transient_core.interfaces.store import CacheStore
from transient_core.keys import KeyPolicy

logger = structlog.get_logger()

TTL = int | timedelta | None


def resolve_ttl(ttl: TTL, default: int) -> int:
    """Convert a TTL argument to whole seconds, falling back to ``default``.

    Fractional ``timedelta`` values round up, so a sub-second TTL still expires
    instead of collapsing to ``0`` (no expiry).
    """
    if ttl is None:
        return default
    if isinstance(ttl, timedelta):
        total = ttl.total_seconds()
        if total < 0:
            raise InvalidTTLError(f"TTL must not be negative: {total}")
        seconds = math.ceil(total)
    elif isinstance(ttl, int) and not isinstance(ttl, bool):
        seconds = ttl
    else:
        raise InvalidTTLError(f"Invalid TTL for cache: {ttl!r}")
    if seconds < 0:
        raise InvalidTTLError(f"TTL must not be negative: {seconds}")
    return seconds


def _as_key_list(keys: Iterable[str]) -> list[str]:
    """Materialize a bulk key argument, rejecting bare strings and non-iterables."""
    if isinstance(keys, (str, bytes)) or not isinstance(keys, Iterable):
        raise InvalidKeyError(f"Expected an iterable of keys, got {type(keys).__name__}")
    return list(keys)


class TransientCache:
    """Simple-cache contract for one namespace of a shared transient store.

    Keys are validated and namespaced by a ``KeyPolicy`` before any store call;
    validation errors propagate. Store failures (``CacheOperationError``) are
    logged and reported as ``False`` (or ``default`` for reads).

    The instance holds no per-call state and may be shared between tasks.
    ``has()`` followed by ``get()``/``set()`` is not atomic: the entry may
    expire or be replaced in between, so prefer ``get()`` with a sentinel
    default over ``has()`` for control flow.

    Bulk operations are not transactional. ``set_multiple`` and
    ``delete_multiple`` attempt every item and return ``False`` if any failed,
    leaving the successful writes in place.
    """

    def __init__(
        self,
        namespace: str,
        store: CacheStore,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        max_key_length: int | None = None,
    ) -> None:
        """Bind a namespace to a store; ``max_key_length`` defaults to the store's."""
        ceiling = store.max_key_length if max_key_length is None else max_key_length
        self._keys = KeyPolicy(namespace, ceiling)
        self._store = store
        self._default_ttl = resolve_ttl(default_ttl, DEFAULT_TTL_SECONDS)

    @property
    def namespace(self) -> str:
        return self._keys.namespace

    @property
    def allowed_key_length(self) -> int:
        return self._keys.allowed_key_length

    @property
    def max_key_length(self) -> int:
        return self._keys.max_key_length

    @property
    def default_ttl(self) -> int:
        return self._default_ttl

    @property
    def key_policy(self) -> KeyPolicy:
        return self._keys

    async def get(self, key: str, default: Any = None) -> Any:
        """Fetch a value, or ``default`` on a miss."""
        physical = self._keys.to_physical_key(key)
        try:
            value, found = await self._store.get(physical)
        except CacheOperationError as e:
            logger.warning("cache_get_failed", namespace=self.namespace, key=key, error=str(e))
            return default
        return value if found else default

    async def set(self, key: str, value: Any, ttl: TTL = None) -> bool:
        """Create or overwrite an entry, resetting its expiry."""
        physical = self._keys.to_physical_key(key)
        seconds = resolve_ttl(ttl, self._default_ttl)
        try:
            return await self._store.set(physical, value, seconds)
        except CacheOperationError as e:
            logger.warning("cache_set_failed", namespace=self.namespace, key=key, error=str(e))
            return False

    async def delete(self, key: str) -> bool:
        """Delete an entry; an absent key counts as success."""
        physical = self._keys.to_physical_key(key)
        try:
            return await self._store.delete(physical)
        except CacheOperationError as e:
            logger.warning("cache_delete_failed", namespace=self.namespace, key=key, error=str(e))
            return False

    async def has(self, key: str) -> bool:
        """Check for a live entry. The answer may be stale by the time it is used."""
        physical = self._keys.to_physical_key(key)
        try:
            return await self._store.exists(physical)
        except CacheOperationError as e:
            logger.warning("cache_has_failed", namespace=self.namespace, key=key, error=str(e))
            return False

    async def clear(self) -> bool:
        """Delete every entry in this namespace, leaving other namespaces alone."""
        try:
            cleared = await self._store.clear_namespace(self.namespace)
        except CacheOperationError as e:
            logger.warning("cache_clear_failed", namespace=self.namespace, error=str(e))
            return False
        logger.info("cache_cleared", namespace=self.namespace, success=cleared)
        return cleared

    async def get_multiple(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        """Fetch several values, keyed by logical key. Stops at the first invalid key."""
        results: dict[str, Any] = {}
        for key in _as_key_list(keys):
            results[key] = await self.get(key, default)
        return results

    async def set_multiple(self, values: Mapping[str, Any], ttl: TTL = None) -> bool:
        """Write every pair; True only if all writes succeeded."""
        if not isinstance(values, Mapping):
            raise InvalidKeyError(f"Expected a mapping of values, got {type(values).__name__}")
        for key in values:
            self._keys.validate(key)
        resolve_ttl(ttl, self._default_ttl)

        outcomes = [await self.set(key, value, ttl) for key, value in values.items()]
        failed = outcomes.count(False)
        logger.debug(
            "cache_set_multiple", namespace=self.namespace, total=len(outcomes), failed=failed
        )
        return failed == 0

    async def delete_multiple(self, keys: Iterable[str]) -> bool:
        """Delete every key; True only if all deletes succeeded."""
        key_list = _as_key_list(keys)
        for key in key_list:
            self._keys.validate(key)

        outcomes = [await self.delete(key) for key in key_list]
        failed = outcomes.count(False)
        logger.debug(
            "cache_delete_multiple", namespace=self.namespace, total=len(outcomes), failed=failed
        )
        return failed == 0
