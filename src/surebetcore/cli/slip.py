"""Slip subcommand: run inference and normalization over a parsed slip."""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from surebetcore.models import ParsedSlip
from surebetcore.ocr import infer_missing_fields, process_slip

app = typer.Typer(help="Bet-slip inference and normalization")


@app.command("infer")
def infer(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with OCR slip fields"),
    normalize: bool = typer.Option(True, "--normalize/--no-normalize", help="Also normalize sport and market"),
) -> None:
    """Fill missing slip fields and print the result as JSON."""
    settings = ctx.obj["settings"]
    try:
        slip = ParsedSlip.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        typer.echo(f"Invalid slip file: {e}")
        raise typer.Exit(1)
    threshold = settings.hidden_decimal_threshold
    if normalize:
        out = process_slip(slip, hidden_decimal_threshold=threshold)
    else:
        out = infer_missing_fields(slip, hidden_decimal_threshold=threshold)
    typer.echo(out.model_dump_json(indent=2, by_alias=True))
