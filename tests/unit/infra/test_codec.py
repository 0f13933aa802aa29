"""Tests for the pickle value codec used by the Redis and database stores."""

from __future__ import annotations

import pickle
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from transient_core.exceptions import CacheOperationError
from transient_infra.stores.codec import decode, encode


@pytest.mark.unit
class TestCodec:
    """Test encode/decode of cache values."""

    @pytest.mark.parametrize(
        "value",
        [
            None,
            False,
            b"not-json",
            {1: (1, 2)},
            {"when": datetime(2024, 5, 1, 12, 30, tzinfo=UTC)},
            Decimal("1.10"),
            {"a", "b"},
        ],
    )
    def test_values_keep_their_type(self, value: object) -> None:
        """Values JSON cannot represent come back equal and of the same type."""
        restored = decode(encode(value, "ns_k"), "ns_k")
        assert restored == value
        assert type(restored) is type(value)

    def test_encode_produces_bytes(self) -> None:
        """Encoded payloads are bytes, ready for a binary column or Redis."""
        assert isinstance(encode("v", "ns_k"), bytes)

    def test_unpicklable_value(self) -> None:
        """Lambdas cannot be stored and report the failing key."""
        with pytest.raises(CacheOperationError) as exc_info:
            encode(lambda: 1, "ns_k")
        assert exc_info.value.operation == "encode"
        assert exc_info.value.key == "ns_k"

    @pytest.mark.parametrize("payload", [b"not-pickle", b"", pickle.dumps("v")[:-3]])
    def test_corrupt_payload(self, payload: bytes) -> None:
        """Garbage or truncated bytes raise CacheOperationError on decode."""
        with pytest.raises(CacheOperationError) as exc_info:
            decode(payload, "ns_k")
        assert exc_info.value.operation == "decode"
