"""Public interface re-exports for transient_core."""

from transient_core.interfaces.store import CacheStore

__all__ = [
    "CacheStore",
]
