
"""
CLI command modules for gedcom_spans.

Each command module defines a single Typer-compatible command function.
"""

from gedcom_spans.cli.commands.decode import decode_command
from gedcom_spans.cli.commands.export import export_command
from gedcom_spans.cli.commands.validate import validate_command

__all__ = [
    "decode_command",
    "export_command",
    "validate_command",
]
