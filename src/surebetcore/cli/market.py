"""Market subcommand: parse OCR market text."""

from __future__ import annotations

import typer

from surebetcore.ocr import format_selection, parse_market, resolve_market_to_option

app = typer.Typer(help="OCR market parsing")


@app.command("parse")
def parse(
    sport: str = typer.Argument(..., help="Sport label as read from the slip"),
    text: str = typer.Argument(..., help="Market text as read from the slip"),
    selection: str = typer.Option("", "--selection", "-s", help="Selection text"),
) -> None:
    """Print the canonical market for a sport + market text."""
    market = parse_market(sport, text, selection)
    typer.echo(market.model_dump_json(indent=2))
    formatted = format_selection(market)
    if formatted:
        typer.echo(f"Selection: {formatted}")
    typer.echo(f"Option: {resolve_market_to_option(market)}")
