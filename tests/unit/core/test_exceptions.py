"""Tests for the cache exception hierarchy."""

from __future__ import annotations

import pytest

from transient_core.exceptions import (
    CacheError,
    CacheErrorKind,
    CacheOperationError,
    InvalidKeyError,
    InvalidTTLError,
    KeyTooLongError,
)


@pytest.mark.unit
class TestCacheErrors:
    """Each error carries a kind discriminator and a message."""

    def test_default_message(self) -> None:
        """Errors raised without a message fall back to a default."""
        err = InvalidKeyError()
        assert str(err) == "Invalid key for cache"
        assert err.kind is CacheErrorKind.INVALID_KEY

    def test_key_too_long_carries_lengths(self) -> None:
        """KeyTooLongError reports the offending and allowed lengths."""
        err = KeyTooLongError(200, 168)
        assert err.key_length == 200
        assert err.allowed_length == 168
        assert "200" in err.message and "168" in err.message

    def test_hierarchy(self) -> None:
        """Argument errors share InvalidKeyError; everything is a CacheError."""
        assert issubclass(KeyTooLongError, InvalidKeyError)
        assert issubclass(InvalidTTLError, InvalidKeyError)
        assert issubclass(CacheOperationError, CacheError)
        assert not issubclass(CacheOperationError, InvalidKeyError)

    def test_operation_error_message(self) -> None:
        """CacheOperationError names the operation and key."""
        err = CacheOperationError("set", "app_k", "connection refused")
        assert err.operation == "set"
        assert err.key == "app_k"
        assert err.kind is CacheErrorKind.OPERATION_FAILED
        assert str(err) == "Store set failed on 'app_k': connection refused"

    def test_operation_error_without_key(self) -> None:
        """Namespace-wide failures have no key."""
        err = CacheOperationError("clear_namespace")
        assert err.key is None
        assert str(err) == "Store clear_namespace failed"
