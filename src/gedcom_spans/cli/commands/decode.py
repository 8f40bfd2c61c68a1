# src/gedcom_spans/cli/commands/decode.py

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from gedcom_spans.cli.utils import build_reader, console, decode_or_exit
from gedcom_spans.config import get_config


def decode_command(
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
    Show the encoding and version a GEDCOM file is read with, and why.
    """
    use_color = get_config().render.get("color", True) if color is None else color
    reader = build_reader(force_encoding, force_version)
    data, decoded = decode_or_exit(gedcom, reader, color=use_color)

    detected = decoded.detected_encoding

    table = Table(title="GEDCOM Decoding")
    table.add_column("Property", style="bold")
    table.add_column("Value")

    table.add_row("Encoding", str(detected.encoding))
    table.add_row("Reason", detected.reason.message())
    table.add_row("Version", str(decoded.version))
    table.add_row("Input bytes", str(len(data)))
    table.add_row("Decoded bytes", str(len(decoded.source)))
    table.add_row("Borrowed", "yes" if decoded.borrowed else "no")
    table.add_row("Warnings", str(len(decoded.warnings)))

    console.print(table)
