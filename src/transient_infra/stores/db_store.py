"""Database-backed implementation of CacheStore using a key/value table."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import structlog
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from transient_core.constants import DEFAULT_MAX_KEY_LENGTH, NO_EXPIRY
from transient_core.exceptions import CacheOperationError
from transient_core.keys import namespace_prefix
from transient_infra.db.models import KEY_COLUMN_LENGTH, TransientEntry
from transient_infra.stores.codec import decode, encode

logger = structlog.get_logger()


def _is_expired(expires_at: datetime) -> bool:
    """Check expiry, handling both naive and aware datetimes."""
    now = datetime.now(UTC)
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return expires_at <= now


class DBStore:
    """Store backed by the application's database. Values are stored pickled.

    Each operation runs in its own session so one store can serve concurrent tasks.
    Expired rows are removed when they are next read.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        max_key_length: int = DEFAULT_MAX_KEY_LENGTH,
        engine: AsyncEngine | None = None,
    ) -> None:
        """Initialize with a session factory; ``engine`` is disposed on ``aclose``."""
        if max_key_length > KEY_COLUMN_LENGTH:
            msg = f"max_key_length {max_key_length} exceeds key column width {KEY_COLUMN_LENGTH}"
            raise ValueError(msg)
        self._session_factory = session_factory
        self.max_key_length = max_key_length
        self._engine = engine

    async def _lookup(self, session: AsyncSession, key: str) -> TransientEntry | None:
        """Return the live entry for ``key``, purging it if expired."""
        entry = await session.get(TransientEntry, key)
        if entry is None:
            return None
        if entry.expires_at is not None and _is_expired(entry.expires_at):
            await session.delete(entry)
            await session.commit()
            return None
        return entry

    async def get(self, key: str) -> tuple[Any, bool]:
        """Retrieve ``(value, found)``."""
        try:
            async with self._session_factory() as session:
                entry = await self._lookup(session, key)
        except SQLAlchemyError as e:
            raise self._failed("get", key, e) from e
        if entry is None:
            return None, False
        return decode(entry.value, key), True

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """Store a value with TTL."""
        expires_at = (
            None if ttl_seconds == NO_EXPIRY else datetime.now(UTC) + timedelta(seconds=ttl_seconds)
        )
        payload = encode(value, key)
        try:
            async with self._session_factory() as session:
                entry = await session.get(TransientEntry, key)
                if entry is None:
                    session.add(TransientEntry(key=key, value=payload, expires_at=expires_at))
                else:
                    entry.value = payload
                    entry.expires_at = expires_at
                await session.commit()
        except SQLAlchemyError as e:
            raise self._failed("set", key, e) from e
        return True

    async def delete(self, key: str) -> bool:
        """Delete a key from the store."""
        try:
            async with self._session_factory() as session:
                await session.execute(delete(TransientEntry).where(TransientEntry.key == key))
                await session.commit()
        except SQLAlchemyError as e:
            raise self._failed("delete", key, e) from e
        return True

    async def exists(self, key: str) -> bool:
        """Check if a key exists and is not expired."""
        try:
            async with self._session_factory() as session:
                entry = await self._lookup(session, key)
        except SQLAlchemyError as e:
            raise self._failed("exists", key, e) from e
        return entry is not None

    async def clear_namespace(self, namespace: str) -> bool:
        """Delete every row whose key starts with the namespace prefix."""
        prefix = namespace_prefix(namespace)
        stmt = delete(TransientEntry).where(TransientEntry.key.startswith(prefix, autoescape=True))
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            raise self._failed("clear_namespace", None, e) from e
        logger.info(
            "store_namespace_cleared", backend="db", namespace=namespace, removed=result.rowcount
        )
        return True

    async def aclose(self) -> None:
        """Dispose the owned engine, if any."""
        if self._engine is not None:
            await self._engine.dispose()

    def _failed(self, operation: str, key: str | None, error: Exception) -> CacheOperationError:
        logger.warning(
            "store_operation_failed", backend="db", operation=operation, key=key, error=str(error)
        )
        return CacheOperationError(operation, key, str(error))
