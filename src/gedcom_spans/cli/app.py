# src/gedcom_spans/cli/app.py

from __future__ import annotations

import typer

from gedcom_spans.cli.commands.decode import decode_command
from gedcom_spans.cli.commands.export import export_command
from gedcom_spans.cli.commands.validate import validate_command

app = typer.Typer(
    name="gedcom-spans",
    help="GEDCOM reader, validator, and exporter",
    add_completion=False,
)

app.command("validate")(validate_command)
app.command("decode")(decode_command)
app.command("export")(export_command)


def main():
    app()


if __name__ == "__main__":
    main()
