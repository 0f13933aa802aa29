"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import pytest

from tests.mocks.mock_store import FakeClock, FlakyStore
from transient_core.cache import TransientCache
from transient_infra.stores.memory_store import MemoryStore


@pytest.fixture
def clock() -> FakeClock:
    """Return a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def memory_store(clock: FakeClock) -> MemoryStore:
    """Return an empty MemoryStore driven by the fake clock."""
    return MemoryStore(clock=clock)


@pytest.fixture
def flaky_store(clock: FakeClock) -> FlakyStore:
    """Return a FlakyStore with no failures configured."""
    return FlakyStore(clock=clock)


@pytest.fixture
def cache(memory_store: MemoryStore) -> TransientCache:
    """Return a TransientCache in namespace 'app' over the memory store."""
    return TransientCache("app", memory_store)
