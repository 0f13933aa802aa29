"""Shared constants for transient-cache."""

from __future__ import annotations

# Longest physical key the default backing store accepts (namespace + "_" + key)
DEFAULT_MAX_KEY_LENGTH = 172

# Joins namespace and logical key into a physical key
KEY_SEPARATOR = "_"

# Entry lifetime when neither the facade nor the call supplies one
DEFAULT_TTL_SECONDS = 3600

# TTL value meaning "keep until deleted"
NO_EXPIRY = 0

# Upper bound for a configured key ceiling; the db store's key column is this wide
KEY_LENGTH_LIMIT = 255
