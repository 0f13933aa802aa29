"""Observability: structured logging."""

from transient_infra.observability.logging import (
    bind_namespace_context,
    clear_namespace_context,
    configure_logging,
)

__all__ = [
    "bind_namespace_context",
    "clear_namespace_context",
    "configure_logging",
]
