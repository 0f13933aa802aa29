"""Factory functions for creating store instances from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from transient_core.interfaces.store import CacheStore

if TYPE_CHECKING:
    from transient_core.config.settings import Settings


async def create_store(settings: Settings) -> CacheStore:
    """Create the store adapter selected by ``settings.store_backend``.

    Redis and SQLAlchemy are imported lazily so the memory and disk backends
    work without those extras configured. The db backend creates its table
    on first use.
    """
    if settings.store_backend == "disk":
        from transient_infra.stores.disk_store import DiskCacheStore

        return DiskCacheStore(settings.cache_dir, max_key_length=settings.max_key_length)

    if settings.store_backend == "redis":
        from redis.asyncio import Redis

        from transient_infra.stores.redis_store import RedisStore

        redis = Redis.from_url(settings.redis_url)
        return RedisStore(redis, max_key_length=settings.max_key_length)

    if settings.store_backend == "db":
        from transient_infra.db.engine import create_engine, create_session_factory, init_db
        from transient_infra.stores.db_store import DBStore

        engine = create_engine(settings)
        await init_db(engine)
        return DBStore(
            create_session_factory(engine),
            max_key_length=settings.max_key_length,
            engine=engine,
        )

    from transient_infra.stores.memory_store import MemoryStore

    return MemoryStore(max_key_length=settings.max_key_length)

