"""Typer application and CLI entry point for storefront.

The CLI is a thin presentation layer over
:class:`~storefront.controller.StorefrontController`: every command opens a
controller, runs one flow on a fresh event loop and renders the resulting
:class:`~storefront.models.ViewState`.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.

See Also:
    :mod:`storefront.config`: base URL resolution used by ``--base-url``.
    :mod:`storefront.output`: output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Any, Awaitable, Callable, Optional

import typer

from storefront import __version__
from storefront.client import AsyncClient, ProductClient
from storefront.config import load_config, resolve_api_base, resolve_config, save_config
from storefront.controller import StorefrontController
from storefront.exceptions import StorefrontError
from storefront.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS
from storefront.models import ClientConfig, Product, ViewState
from storefront.output import (
    OutputFormat,
    OutputManager,
    error,
    format_latency,
    format_response,
    get_output,
    info,
    set_output,
    success,
)

app = typer.Typer(
    name="storefront",
    help="Browse the product catalog and the quote of the day.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
products_app = typer.Typer(help="List, add and remove products.", no_args_is_help=True)
config_app = typer.Typer(help="Show or change the API base URL.", no_args_is_help=True)
app.add_typer(products_app, name="products")
app.add_typer(config_app, name="config")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"storefront {__version__}")
        raise typer.Exit(EXIT_SUCCESS)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", "-b", help="External API base URL (/api is appended)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Initialise output and stash shared options in ``ctx.obj``."""
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["base_url"] = base_url


# ------------------------------------------------------------------ #
# Plumbing
# ------------------------------------------------------------------ #


def _make_controller(config: ClientConfig) -> StorefrontController:
    return StorefrontController(config)


def _make_client(config: ClientConfig) -> AsyncClient:
    return AsyncClient(config)


def _resolve(ctx: typer.Context) -> ClientConfig:
    try:
        return resolve_config(cli_base_url=(ctx.obj or {}).get("base_url"))
    except StorefrontError as exc:
        raise _fail(exc) from exc


def _fail(exc: StorefrontError) -> typer.Exit:
    """Report *exc* and return the exit carrying its code."""
    error(str(exc))
    return typer.Exit(exc.exit_code)


def _run_flow(
    ctx: typer.Context,
    flow: Callable[[StorefrontController], Awaitable[Any]],
) -> ViewState:
    """Open a controller, await *flow* on it and return the final state."""
    config = _resolve(ctx)

    async def session() -> ViewState:
        async with _make_controller(config) as controller:
            await flow(controller)
            return controller.snapshot()

    return asyncio.run(session())


def _render_products(state: ViewState) -> None:
    get_output().print_products(state.items)

    latency = format_latency(state.list_ms)
    if latency:
        info(latency)
    if state.product_error:
        error(state.product_error)
        raise typer.Exit(EXIT_GENERIC_FAILURE)


# ------------------------------------------------------------------ #
# products
# ------------------------------------------------------------------ #


@products_app.command("list")
def products_list(ctx: typer.Context) -> None:
    """List every product in the catalog."""
    state = _run_flow(ctx, lambda c: c.start())
    _render_products(state)


@products_app.command("add")
def products_add(
    ctx: typer.Context,
    name: str = typer.Option("", "--name", "-n", help="Product name (blank: generated)."),
    price: str = typer.Option("9.99", "--price", "-p", help="Price (invalid: 9.99)."),
) -> None:
    """Create a product, then show the refreshed catalog."""

    async def flow(controller: StorefrontController) -> Optional[Product]:
        controller.set_draft(name=name, price=price)
        created = await controller.add()
        if created is not None:
            success(f"Created product {created.id} ({created.name})")
        return created

    _render_products(_run_flow(ctx, flow))


@products_app.command("remove")
def products_remove(
    ctx: typer.Context,
    product_id: int = typer.Argument(..., help="Id of the product to delete."),
) -> None:
    """Delete a product, then show the refreshed catalog."""

    async def flow(controller: StorefrontController) -> bool:
        removed = await controller.remove(product_id)
        if removed:
            success(f"Removed product {product_id}")
        return removed

    _render_products(_run_flow(ctx, flow))


@products_app.command("show")
def products_show(
    ctx: typer.Context,
    product_id: int = typer.Argument(..., help="Id of the product to show."),
) -> None:
    """Show a single product."""
    config = _resolve(ctx)

    async def fetch() -> Product:
        async with _make_client(config) as client:
            return await ProductClient(client).get(product_id)

    try:
        product = asyncio.run(fetch())
    except StorefrontError as exc:
        raise _fail(exc) from exc

    format_response(product.model_dump())


# ------------------------------------------------------------------ #
# quote
# ------------------------------------------------------------------ #


@app.command("quote")
def quote(ctx: typer.Context) -> None:
    """Fetch the quote of the day."""
    state = _run_flow(ctx, lambda c: c.get_quote())
    get_output().print_data(state.quote)

    latency = format_latency(state.quote_ms)
    if latency:
        info(latency)
    if state.quote_error:
        error(state.quote_error)
        raise typer.Exit(EXIT_GENERIC_FAILURE)


# ------------------------------------------------------------------ #
# config
# ------------------------------------------------------------------ #


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration and the resolved API base."""
    config = _resolve(ctx)
    data = config.model_dump(mode="json")
    data["resolved_api_base"] = resolve_api_base(config.api_base)
    format_response(data)


@config_app.command("set-base")
def config_set_base(url: str = typer.Argument(..., help="External API base URL.")) -> None:
    """Store an external API base URL in the user config."""
    try:
        config = load_config()
        config.api_base = url
        path = save_config(config)
    except StorefrontError as exc:
        raise _fail(exc) from exc
    success(f"API base set to {resolve_api_base(url)} ({path})")


@config_app.command("clear-base")
def config_clear_base() -> None:
    """Remove the API base override; requests go to the relative /api path."""
    try:
        config = load_config()
        config.api_base = None
        save_config(config)
    except StorefrontError as exc:
        raise _fail(exc) from exc
    success("API base override cleared")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``storefront`` console script.

    Unhandled :class:`~storefront.exceptions.StorefrontError` instances
    cause a clean exit with the error's ``exit_code``.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except StorefrontError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
