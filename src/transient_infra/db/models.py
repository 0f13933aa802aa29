"""SQLAlchemy ORM table models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, LargeBinary, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from transient_core.constants import KEY_LENGTH_LIMIT

KEY_COLUMN_LENGTH = KEY_LENGTH_LIMIT


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class TransientEntry(Base):
    """Key/pickled-value entry with optional expiry."""

    __tablename__ = "transient_entries"

    key: Mapped[str] = mapped_column(String(KEY_COLUMN_LENGTH), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
