"""CacheStore adapters."""

from transient_infra.stores.disk_store import DiskCacheStore
from transient_infra.stores.memory_store import MemoryStore

__all__ = [
    "DiskCacheStore",
    "MemoryStore",
]
