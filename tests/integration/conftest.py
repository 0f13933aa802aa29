"""Integration test fixtures — real Redis."""

from __future__ import annotations

import socket
import time
from collections.abc import AsyncGenerator

import pytest

REDIS_URL = "redis://localhost:6379/1"


def _tcp_reachable(
    host: str,
    port: int,
    timeout: float = 1.0,
    retries: int = 3,
    delay: float = 1.0,
) -> bool:
    """Check if a TCP service is reachable, retrying on failure."""
    for attempt in range(retries):
        try:
            with socket.create_connection((host, port), timeout=timeout):
                return True
        except OSError:
            if attempt < retries - 1:
                time.sleep(delay)
    return False


_redis_up = _tcp_reachable("localhost", 6379)

require_redis = pytest.mark.skipif(
    not _redis_up,
    reason="Redis not reachable on localhost:6379",
)


@pytest.fixture
async def redis_client() -> AsyncGenerator[object, None]:
    """Yield a client on a scratch Redis database, flushed before and after."""
    from redis.asyncio import Redis

    client = Redis.from_url(REDIS_URL)
    await client.flushdb()
    yield client
    await client.flushdb()
    await client.aclose()
