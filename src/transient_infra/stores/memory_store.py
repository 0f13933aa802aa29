"""In-process implementation of CacheStore."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from transient_core.constants import DEFAULT_MAX_KEY_LENGTH, NO_EXPIRY
from transient_core.keys import namespace_prefix

# Writes between sweeps of expired entries
PURGE_INTERVAL = 256


class MemoryStore:
    """Dict-backed store for tests and single-process use.

    Expired entries are dropped when read, on ``clear_namespace``, and by a
    sweep every ``purge_interval`` writes, so keys that are never read again
    do not accumulate.
    """

    def __init__(
        self,
        max_key_length: int = DEFAULT_MAX_KEY_LENGTH,
        clock: Callable[[], float] = time.monotonic,
        purge_interval: int = PURGE_INTERVAL,
    ) -> None:
        """Initialize an empty store; ``clock`` returns the current time in seconds."""
        self.max_key_length = max_key_length
        self._clock = clock
        self._purge_interval = purge_interval
        self._writes = 0
        self._entries: dict[str, tuple[Any, float | None]] = {}

    def _live(self, key: str) -> tuple[Any, bool]:
        """Look up a key, dropping it if expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None, False
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._entries[key]
            return None, False
        return value, True

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        expired = [
            key
            for key, (_, expires_at) in self._entries.items()
            if expires_at is not None and expires_at <= now
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    async def get(self, key: str) -> tuple[Any, bool]:
        """Retrieve ``(value, found)``."""
        return self._live(key)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """Store a value with TTL."""
        self._writes += 1
        if self._writes % self._purge_interval == 0:
            self.purge_expired()
        expires_at = None if ttl_seconds == NO_EXPIRY else self._clock() + ttl_seconds
        self._entries[key] = (value, expires_at)
        return True

    async def delete(self, key: str) -> bool:
        """Delete a key from the store."""
        self._entries.pop(key, None)
        return True

    async def exists(self, key: str) -> bool:
        """Check if a live entry exists."""
        return self._live(key)[1]

    async def clear_namespace(self, namespace: str) -> bool:
        """Drop every key carrying the namespace prefix, and any expired entry."""
        self.purge_expired()
        prefix = namespace_prefix(namespace)
        for key in [k for k in self._entries if k.startswith(prefix)]:
            del self._entries[key]
        return True

    async def aclose(self) -> None:
        """Nothing to release."""

    def __len__(self) -> int:
        return len(self._entries)
