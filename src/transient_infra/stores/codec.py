"""Value serialization shared by the byte-oriented stores."""

from __future__ import annotations

import pickle
from typing import Any

import structlog

from transient_core.exceptions import CacheOperationError

logger = structlog.get_logger()


def encode(value: Any, key: str) -> bytes:
    """Pickle ``value``; unpicklable values raise CacheOperationError."""
    try:
        return pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)
    except (pickle.PicklingError, TypeError, AttributeError, RecursionError) as e:
        logger.warning("store_operation_failed", operation="encode", key=key, error=str(e))
        raise CacheOperationError("encode", key, str(e)) from e


def decode(payload: Any, key: str) -> Any:
    """Unpickle a stored payload; corrupt or foreign payloads raise CacheOperationError.

    Only read payloads this package wrote: unpickling runs arbitrary code.
    """
    try:
        return pickle.loads(payload)
    # pickle.loads can raise almost anything on bytes it did not produce
    except Exception as e:
        logger.warning("store_operation_failed", operation="decode", key=key, error=str(e))
        raise CacheOperationError("decode", key, str(e)) from e
