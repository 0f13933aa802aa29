"""Abstract transient store interface."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Physical key/value store with per-entry expiry — adapters can be swapped.

    Adapters report backend failures by raising ``CacheOperationError``.
    """

    max_key_length: int

    async def get(self, key: str) -> tuple[Any, bool]:
        """Return ``(value, found)``; ``found`` is False on a miss or expired entry."""
        ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """Store a value; ``ttl_seconds == 0`` keeps it until deleted."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete a key. Deleting an absent key succeeds."""
        ...

    async def exists(self, key: str) -> bool:
        """Check if a live entry exists for the key."""
        ...

    async def clear_namespace(self, namespace: str) -> bool:
        """Delete every entry whose key belongs to the namespace."""
        ...

    async def aclose(self) -> None:
        """Release connections or file handles held by the store."""
        ...
