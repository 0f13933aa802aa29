"""Tests for DiskCacheStore."""

from __future__ import annotations

import pickle
import sqlite3
import tempfile
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import diskcache
import pytest

from transient_core.cache import TransientCache
from transient_core.exceptions import CacheOperationError
from transient_infra.stores.disk_store import DiskCacheStore


@pytest.fixture
def disk_store() -> Generator[DiskCacheStore, None, None]:
    """Create a temporary DiskCacheStore."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = DiskCacheStore(Path(tmpdir) / "test_cache")
        yield store
        store.close()


@pytest.mark.unit
class TestDiskCacheStore:
    """Test DiskCacheStore operations."""

    async def test_set_and_get(self, disk_store: DiskCacheStore) -> None:
        """Set a value and retrieve it."""
        assert await disk_store.set("ns_key1", {"n": 1}, 60) is True
        assert await disk_store.get("ns_key1") == ({"n": 1}, True)

    async def test_get_missing_key(self, disk_store: DiskCacheStore) -> None:
        """Get on missing key reports not found."""
        assert await disk_store.get("nonexistent") == (None, False)

    async def test_stored_none_is_found(self, disk_store: DiskCacheStore) -> None:
        """None is a value, not a miss."""
        await disk_store.set("ns_k", None, 60)
        assert await disk_store.get("ns_k") == (None, True)
        assert await disk_store.exists("ns_k") is True

    async def test_exists_and_delete(self, disk_store: DiskCacheStore) -> None:
        """Exists returns correct boolean; delete is idempotent."""
        assert await disk_store.exists("ns_key1") is False
        await disk_store.set("ns_key1", "value1", 0)
        assert await disk_store.exists("ns_key1") is True
        assert await disk_store.delete("ns_key1") is True
        assert await disk_store.delete("ns_key1") is True
        assert await disk_store.exists("ns_key1") is False

    async def test_zero_ttl_passes_no_expiry(self, disk_store: DiskCacheStore) -> None:
        """TTL 0 is stored without an expire time."""
        with patch.object(disk_store._cache, "set", return_value=True) as mock_set:
            await disk_store.set("ns_k", "v", 0)
        mock_set.assert_called_once_with("ns_k", "v", expire=None)

    async def test_clear_namespace(self, disk_store: DiskCacheStore) -> None:
        """Only the namespace's keys are removed."""
        await disk_store.set("ns_a", 1, 60)
        await disk_store.set("ns_b", 2, 60)
        await disk_store.set("nsx_a", 3, 60)
        assert await disk_store.clear_namespace("ns") is True
        assert await disk_store.exists("ns_a") is False
        assert await disk_store.exists("ns_b") is False
        assert await disk_store.exists("nsx_a") is True

    async def test_timeout_becomes_operation_error(self, disk_store: DiskCacheStore) -> None:
        """diskcache.Timeout is raised as CacheOperationError."""
        with patch.object(disk_store._cache, "set", side_effect=diskcache.Timeout("locked")):
            with pytest.raises(CacheOperationError) as exc_info:
                await disk_store.set("ns_k", "v", 60)
        assert exc_info.value.operation == "set"
        assert exc_info.value.key == "ns_k"

    async def test_unpicklable_value_becomes_operation_error(
        self, disk_store: DiskCacheStore
    ) -> None:
        """A value diskcache cannot pickle raises CacheOperationError."""
        with pytest.raises(CacheOperationError) as exc_info:
            await disk_store.set("ns_k", lambda: 1, 60)
        assert exc_info.value.operation == "set"

    @pytest.mark.parametrize(
        "error",
        [
            sqlite3.OperationalError("database is locked"),
            OSError("disk full"),
            pickle.UnpicklingError("truncated"),
        ],
    )
    async def test_backend_faults_become_operation_errors(
        self, disk_store: DiskCacheStore, error: Exception
    ) -> None:
        """SQLite, filesystem and unpickling faults are all mapped."""
        with patch.object(disk_store._cache, "get", side_effect=error):
            with pytest.raises(CacheOperationError) as exc_info:
                await disk_store.get("ns_k")
        assert exc_info.value.operation == "get"

    async def test_facade_survives_unpicklable_value(self, disk_store: DiskCacheStore) -> None:
        """The facade reports False for a value that cannot be stored."""
        cache = TransientCache("app", disk_store)
        assert await cache.set("k", lambda: 1) is False
        assert await cache.has("k") is False

    async def test_facade_over_disk(self, disk_store: DiskCacheStore) -> None:
        """The facade round-trips through the disk store."""
        cache = TransientCache("app", disk_store)
        await cache.set_multiple({"a": 1, "b": 2})
        assert await cache.get_multiple(["a", "b", "c"], default=0) == {"a": 1, "b": 2, "c": 0}
