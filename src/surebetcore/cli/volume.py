"""Volume subcommand: consolidate per-currency amounts."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from surebetcore.currency import StaticRateProvider, consolidate_volume, format_currency_for_display
from surebetcore.errors import RateUnavailableError

app = typer.Typer(help="Multi-currency volume consolidation")


@app.command("consolidate")
def consolidate(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help='JSON file: {"amounts": {...}, "rates": {...}}'),
    currency: str | None = typer.Option(None, "--currency", "-c", help="Consolidation currency (default from config)"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Consolidate amounts by currency into one reporting currency."""
    settings = ctx.obj["settings"]
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        typer.echo(f"Invalid volume file: {e}")
        raise typer.Exit(1)
    if not isinstance(payload, dict):
        typer.echo("Invalid volume file: expected a JSON object with amounts and rates")
        raise typer.Exit(1)
    amounts = payload.get("amounts") or {}
    extra_rates = payload.get("rates") or {}
    if not isinstance(amounts, dict) or not isinstance(extra_rates, dict):
        typer.echo("Invalid volume file: amounts and rates must be objects keyed by currency")
        raise typer.Exit(1)
    target = (currency or settings.consolidation_currency).upper()
    try:
        provider = StaticRateProvider({**settings.fallback_rates, **extra_rates})
        result = consolidate_volume(
            amounts,
            target,
            provider.get_rate,
            dust_threshold=settings.dust_threshold,
        )
    except RateUnavailableError as e:
        typer.echo(f"Missing rate: {e}")
        raise typer.Exit(1)
    except (TypeError, ValueError) as e:
        typer.echo(f"Invalid volume file: {e}")
        raise typer.Exit(1)
    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return
    for entry in result.breakdown:
        typer.echo(f"  {entry.currency:<6} {format_currency_for_display(entry.value, entry.currency)}")
    for code, rate in result.rates.items():
        typer.echo(f"  rate {code} -> {result.currency}: {rate:.4f}")
    typer.echo(f"Total: {format_currency_for_display(result.total, result.currency)}")
