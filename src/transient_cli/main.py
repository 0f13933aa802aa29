"""CLI entrypoint using typer."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import typer
from rich.console import Console

from transient_core.cache import TransientCache
from transient_core.config.settings import Settings
from transient_core.exceptions import InvalidKeyError
from transient_infra.factories import create_store
from transient_infra.observability import (
    bind_namespace_context,
    clear_namespace_context,
    configure_logging,
)

T = TypeVar("T")

_MISS = object()

app = typer.Typer(
    name="transient",
    help="Namespaced TTL key-value cache over a pluggable transient store",
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    namespace: str = typer.Option(..., "--namespace", "-n", help="Cache namespace"),
    backend: str | None = typer.Option(
        None, "--backend", help="Override the store backend (memory, disk, redis, db)"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Select the namespace and store for the command that follows."""
    overrides: dict[str, Any] = {}
    if backend:
        overrides["store_backend"] = backend
    if verbose:
        overrides["log_level"] = "DEBUG"
    settings = Settings(**overrides)  # type: ignore[arg-type]
    configure_logging(settings)
    ctx.obj = {"namespace": namespace, "settings": settings}


def _execute(ctx: typer.Context, action: Callable[[TransientCache], Awaitable[T]]) -> T:
    """Build the cache for the current namespace and run ``action`` against it."""
    namespace: str = ctx.obj["namespace"]
    settings: Settings = ctx.obj["settings"]

    async def _run() -> T:
        bind_namespace_context(namespace, settings.store_backend)
        store = await create_store(settings)
        try:
            cache = TransientCache(namespace, store, default_ttl=settings.default_ttl_seconds)
            return await action(cache)
        finally:
            await store.aclose()
            clear_namespace_context()

    try:
        return asyncio.run(_run())
    except InvalidKeyError as e:
        console.print(f"[red]Error:[/red] {e}", style="bold")
        raise typer.Exit(code=1) from e


def _render(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _require(ok: bool, message: str) -> None:
    if not ok:
        console.print(f"[red]{message}[/red]")
        raise typer.Exit(code=1)


@app.command()
def get(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Logical key"),
    default: str | None = typer.Option(None, "--default", help="Printed on a cache miss"),
) -> None:
    """Print the value stored under KEY."""
    value = _execute(ctx, lambda cache: cache.get(key, _MISS))
    if value is _MISS:
        if default is None:
            raise typer.Exit(code=1)
        value = default
    console.print(_render(value), markup=False)


@app.command("set")
def set_(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Logical key"),
    value: str = typer.Argument(..., help="Value to store"),
    ttl: int | None = typer.Option(None, "--ttl", help="Lifetime in seconds (0 = no expiry)"),
    as_json: bool = typer.Option(False, "--json", help="Parse VALUE as JSON before storing"),
) -> None:
    """Store VALUE under KEY."""
    payload: Any = value
    if as_json:
        try:
            payload = json.loads(value)
        except json.JSONDecodeError as e:
            console.print(f"[red]Error:[/red] VALUE is not valid JSON: {e}", style="bold")
            raise typer.Exit(code=1) from e
    ok = _execute(ctx, lambda cache: cache.set(key, payload, ttl))
    _require(ok, f"Failed to store {key}")
    console.print(f"[green]Stored[/green] {key}")


@app.command()
def delete(
    ctx: typer.Context,
    keys: list[str] = typer.Argument(..., help="One or more logical keys"),
) -> None:
    """Delete one or more keys."""
    ok = _execute(ctx, lambda cache: cache.delete_multiple(keys))
    _require(ok, "Failed to delete one or more keys")
    console.print(f"[green]Deleted[/green] {len(keys)} key(s)")


@app.command()
def has(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Logical key"),
) -> None:
    """Exit 0 if KEY holds a live entry, 1 otherwise."""
    found = _execute(ctx, lambda cache: cache.has(key))
    console.print("yes" if found else "no")
    if not found:
        raise typer.Exit(code=1)


@app.command()
def clear(ctx: typer.Context) -> None:
    """Delete every entry in the namespace."""
    ok = _execute(ctx, lambda cache: cache.clear())
    _require(ok, "Failed to clear namespace")
    console.print(f"[green]Cleared[/green] namespace {ctx.obj['namespace']}")


if __name__ == "__main__":
    app()
