"""Click-based CLI for metal-tracker.

Thin wrapper around the store. Zero business logic: every command builds
the configured source, lets the store refresh, and renders a snapshot.
"""

from __future__ import annotations

import asyncio
import json
import logging

import click
from rich.console import Console
from rich.table import Table

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine from synchronous Click code."""
    return asyncio.run(coro)


def _load_config(ctx: click.Context):
    """Load config lazily, caching on first call."""
    if "config" not in ctx.obj:
        from metal_tracker.core import load_config

        ctx.obj["config"] = load_config(config_path=ctx.obj.get("config_path"))
    return ctx.obj["config"]


async def _open_store(config):
    """Create the configured source and a store that has finished its first refresh."""
    from metal_tracker.prices import create_source
    from metal_tracker.store import create_store

    source = create_source(config.source)
    store = create_store(source, single_flight=config.cache.single_flight)
    await store.wait_ready()
    return source, store


async def _close_source(source) -> None:
    close = getattr(source, "close", None)
    if close is not None:
        await close()


def _change_style(value: float) -> str:
    return "green" if value >= 0 else "red"


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="METAL_TRACKER_CONFIG",
    default=None,
    help="Path to metal-tracker.yml config file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.version_option(package_name="metal-tracker")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """Metal Tracker: live precious metal prices and trends."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["console"] = console
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# prices
# ---------------------------------------------------------------------------


@cli.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.pass_context
def prices(ctx: click.Context, output_format: str) -> None:
    """Show the current price of every tracked metal."""
    config = _load_config(ctx)

    async def _run():
        source, store = await _open_store(config)
        try:
            state = store.snapshot()
        finally:
            await _close_source(source)

        if output_format == "json":
            click.echo(json.dumps(state.model_dump(mode="json"), indent=2))
        else:
            _output_prices_table(state)

    _run_async(_run())


def _output_prices_table(state) -> None:
    """Render the snapshot as a Rich table."""
    from metal_tracker.formatting import (
        format_inr,
        format_percentage,
        format_relative_time,
    )

    table = Table(title="Precious Metals")
    table.add_column("Metal", style="bold")
    table.add_column("Price / oz", justify="right")
    table.add_column("24k / g", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("Change %", justify="right")

    for metal in state.metals:
        name = f"{metal.icon} {metal.name}"
        if metal.price is None:
            table.add_row(name, f"[red]{metal.error or 'unavailable'}[/red]", "", "", "")
            continue
        style = _change_style(metal.price.ch)
        price_cell = format_inr(metal.price.price)
        if metal.error:
            price_cell += " [yellow](stale)[/yellow]"
        table.add_row(
            name,
            price_cell,
            format_inr(metal.price.price_gram_24k),
            f"[{style}]{metal.price.ch:+.2f}[/{style}]",
            f"[{style}]{format_percentage(metal.price.chp)}[/{style}]",
        )

    console.print(table)
    if state.last_updated is not None:
        console.print(f"Last updated {format_relative_time(state.last_updated)}")


# ---------------------------------------------------------------------------
# history
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("metal_id")
@click.option(
    "--timeframe",
    "-t",
    type=click.Choice(["24h", "Week", "Month"]),
    default="Week",
    help="Historical window.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.pass_context
def history(
    ctx: click.Context,
    metal_id: str,
    timeframe: str,
    output_format: str,
) -> None:
    """Show the price history of one metal (gold, silver, platinum, palladium)."""
    from metal_tracker.core import UnknownMetalError, require_metal

    try:
        require_metal(metal_id)
    except UnknownMetalError as e:
        raise click.UsageError(str(e)) from e

    config = _load_config(ctx)

    async def _run():
        source, store = await _open_store(config)
        try:
            await store.fetch_history(metal_id, timeframe)
        finally:
            await _close_source(source)

        metal = store.lookup_item(metal_id)
        series = metal.history(timeframe) if metal is not None else None
        if not series:
            reason = metal.error if metal is not None and metal.error else "no data"
            console.print(
                f"[yellow]No {timeframe} history available for {metal_id} ({reason}).[/yellow]"
            )
            raise SystemExit(1)

        if output_format == "json":
            click.echo(
                json.dumps([p.model_dump(mode="json") for p in series], indent=2)
            )
        else:
            _output_history_table(metal, timeframe, series)

    _run_async(_run())


def _output_history_table(metal, timeframe: str, series) -> None:
    """Render a historical series as a Rich table."""
    from metal_tracker.formatting import format_inr, format_timestamp

    table = Table(title=f"{metal.name} ({timeframe})")
    table.add_column("Time")
    table.add_column("Price", justify="right")
    for point in series:
        table.add_row(format_timestamp(point.date), format_inr(point.price))

    console.print(table)
