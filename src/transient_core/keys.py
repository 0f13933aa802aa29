"""Key validation and namespacing."""

from __future__ import annotations

from transient_core.constants import DEFAULT_MAX_KEY_LENGTH, KEY_SEPARATOR
from transient_core.exceptions import InvalidKeyError, KeyTooLongError


def namespace_prefix(namespace: str) -> str:
    """Prefix shared by every physical key in ``namespace``."""
    return f"{namespace}{KEY_SEPARATOR}"


def check_key(key: object, allowed_length: int) -> None:
    """Raise unless ``key`` is a non-empty string no longer than ``allowed_length``."""
    if not isinstance(key, str) or not key:
        raise InvalidKeyError(f"Invalid key for cache: {key!r}")
    if len(key) > allowed_length:
        raise KeyTooLongError(len(key), allowed_length)


class KeyPolicy:
    """Turns logical keys into namespaced physical keys.

    The namespace is checked against the full ``max_key_length``; logical keys
    are checked against what remains after the namespace and separator, so a
    physical key never exceeds the store's ceiling.
    """

    def __init__(self, namespace: str, max_key_length: int = DEFAULT_MAX_KEY_LENGTH) -> None:
        """Validate the namespace and pre-compute the logical key budget."""
        check_key(namespace, max_key_length)
        self._namespace = namespace
        self._max_key_length = max_key_length
        self._allowed_key_length = max_key_length - len(namespace) - len(KEY_SEPARATOR)

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def max_key_length(self) -> int:
        return self._max_key_length

    @property
    def allowed_key_length(self) -> int:
        return self._allowed_key_length

    @property
    def namespace_prefix(self) -> str:
        return namespace_prefix(self._namespace)

    def validate(self, key: object) -> None:
        """Raise InvalidKeyError / KeyTooLongError for an illegal logical key."""
        check_key(key, self._allowed_key_length)

    def to_physical_key(self, key: str) -> str:
        """Validate a logical key and return its namespaced form."""
        self.validate(key)
        return f"{self.namespace_prefix}{key}"
