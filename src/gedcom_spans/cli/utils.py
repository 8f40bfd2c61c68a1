# src/gedcom_spans/cli/utils.py

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import typer
from rich.console import Console
from rich.text import Text

from gedcom_spans.config import get_config
from gedcom_spans.diagnostics import Diagnostic, GedcomError, render_diagnostic
from gedcom_spans.loader.source import GedcomSource
from gedcom_spans.logging import get_logger
from gedcom_spans.reader import DecodedInput, ParseOptions, Reader

log = get_logger(__name__)

console = Console()


def build_reader(force_encoding: Optional[str], force_version: Optional[str]) -> Reader:
    """
    Reader for the command line: explicit options win over configuration.
    """
    configured = ParseOptions.from_config()
    try:
        forced = ParseOptions.from_names(force_encoding, force_version)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    return Reader(
        ParseOptions(
            force_encoding=forced.force_encoding or configured.force_encoding,
            force_version=forced.force_version or configured.force_version,
        )
    )


def print_diagnostic(
    diag: Diagnostic,
    source: Any,
    source_name: Optional[str],
    *,
    color: bool,
) -> None:
    cfg = get_config()
    rendered = render_diagnostic(
        diag,
        source,
        source_name,
        color=color,
        width=cfg.render.get("max_width"),
        context_lines=int(cfg.render.get("context_lines", 2)),
    )
    console.print(Text.from_ansi(rendered), soft_wrap=True)


def decode_or_exit(
    path: Path,
    reader: Reader,
    *,
    color: bool,
) -> Tuple[bytes, DecodedInput]:
    """
    Read and decode ``path``. A decoding error is shown against the raw
    bytes and ends the command with exit code 1.
    """
    data = path.read_bytes()
    try:
        decoded = reader.decode(data)
    except GedcomError as exc:
        log.info(f"Decoding {path} failed: [{exc.code}]")
        source = exc.source if isinstance(exc.source, GedcomSource) else data
        print_diagnostic(exc, source, str(path), color=color)
        raise typer.Exit(code=1)
    return data, decoded


def write_json(
    data: Dict[str, Any],
    *,
    out: Optional[Path],
    pretty: bool,
):
    """
    Write JSON to stdout or file.
    """
    if pretty:
        payload = json.dumps(data, indent=2, ensure_ascii=False)
    else:
        payload = json.dumps(data, separators=(",", ":"), ensure_ascii=False)

    if out:
        out.write_text(payload, encoding="utf-8")
    else:
        print(payload)
