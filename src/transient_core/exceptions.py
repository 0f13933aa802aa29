"""Custom exception hierarchy for transient-cache."""

from __future__ import annotations

from enum import StrEnum


class CacheErrorKind(StrEnum):
    """Discriminator carried by every cache error."""

    INVALID_KEY = "invalid_key"
    KEY_TOO_LONG = "key_too_long"
    INVALID_TTL = "invalid_ttl"
    OPERATION_FAILED = "operation_failed"


class CacheError(Exception):
    """Base exception for all transient-cache errors."""

    kind: CacheErrorKind = CacheErrorKind.OPERATION_FAILED
    default_message = "Generic cache error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidKeyError(CacheError):
    """Raised when a key (or bulk argument) is not a legal cache key."""

    kind = CacheErrorKind.INVALID_KEY
    default_message = "Invalid key for cache"


class KeyTooLongError(InvalidKeyError):
    """Raised when namespace + key would exceed the store's key length ceiling."""

    kind = CacheErrorKind.KEY_TOO_LONG

    def __init__(self, key_length: int, allowed_length: int) -> None:
        self.key_length = key_length
        self.allowed_length = allowed_length
        super().__init__(
            f"Key of length {key_length} exceeds the allowed length of {allowed_length}"
        )


class InvalidTTLError(InvalidKeyError):
    """Raised when a TTL is negative or of an unsupported type."""

    kind = CacheErrorKind.INVALID_TTL
    default_message = "Invalid TTL for cache"


class CacheOperationError(CacheError):
    """Raised by store adapters when the backing store fails an operation."""

    kind = CacheErrorKind.OPERATION_FAILED

    def __init__(self, operation: str, key: str | None = None, reason: str = "") -> None:
        self.operation = operation
        self.key = key
        target = f" on {key!r}" if key is not None else ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"Store {operation} failed{target}{detail}")
