# src/gedcom_spans/cli/commands/validate.py

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from gedcom_spans.cli.utils import build_reader, console, decode_or_exit, print_diagnostic
from gedcom_spans.config import get_config
from gedcom_spans.reader import Validity


def validate_command(
    gedcom: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False),
    force_encoding: Optional[str] = typer.Option(
        None,
        "--force-encoding",
        help="Decode with this encoding (e.g. ANSEL, UTF-8, Windows-1252)",
    ),
    force_version: Optional[str] = typer.Option(
        None,
        "--force-version",
        help="Read the file as this GEDCOM version (e.g. 5.5.1)",
    ),
    color: Optional[bool] = typer.Option(
        None,
        "--color/--no-color",
        help="Colour the diagnostics (default from configuration)",
    ),
):
    """
    Check a GEDCOM file and report every problem found.
    """
    use_color = get_config().render.get("color", True) if color is None else color
    reader = build_reader(force_encoding, force_version)
    _, decoded = decode_or_exit(gedcom, reader, color=use_color)

    with decoded:
        result = reader.validate(decoded)

        for diag in result.diagnostics:
            print_diagnostic(diag, decoded.source, str(gedcom), color=use_color)

    table = Table(title="GEDCOM Validation")
    table.add_column("Check", style="bold")
    table.add_column("Result", justify="right")

    table.add_row("Version", str(decoded.version))
    table.add_row("Encoding", str(decoded.detected_encoding.encoding))
    table.add_row("Top-level records", str(result.record_count))
    table.add_row("Errors", str(result.error_count))
    table.add_row("Warnings", str(result.warning_count))
    table.add_row("Advice", str(result.advice_count))

    console.print(table)
    console.print(result.message(), soft_wrap=True, markup=False)

    if result.validity is Validity.INVALID:
        raise typer.Exit(code=1)
