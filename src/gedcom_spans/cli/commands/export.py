# src/gedcom_spans/cli/commands/export.py

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import typer

from gedcom_spans.cli.utils import build_reader, decode_or_exit, write_json
from gedcom_spans.config import get_config
from gedcom_spans.loader import RawRecord, RecordTree, fold_continuations
from gedcom_spans.spans import Sourced, Span


def _span(span: Span) -> Dict[str, int]:
    return {"offset": span.offset, "length": span.length}


def record_to_dict(record: Sourced[RawRecord]) -> Dict[str, Any]:
    raw = record.value
    value = raw.value

    data: Dict[str, Any] = {
        "tag": raw.tag,
        "span": _span(record.span),
    }
    if raw.xref is not None:
        data["xref"] = raw.xref
    if value.is_ptr:
        data["pointer"] = None if value.is_void else value.text
    elif value.is_str:
        data["value"] = value.text
        data["value_span"] = _span(raw.value_span)

    text = fold_continuations(raw)
    if text is not None and text != value.text:
        data["text"] = text

    if raw.records:
        data["children"] = [record_to_dict(child) for child in raw.records]
    return data


def tree_to_dict(tree: RecordTree) -> Dict[str, Any]:
    encoding = tree.encoding
    return {
        "version": str(tree.version) if tree.version else None,
        "encoding": str(encoding.encoding) if encoding else None,
        "encoding_reason": encoding.reason.message() if encoding else None,
        "record_count": len(tree),
        "records": [record_to_dict(record) for record in tree],
    }


def export_command(
    gedcom: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write output to file instead of stdout",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Pretty-print JSON",
    ),
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
):
    """
    Export the record tree of a GEDCOM file to JSON (stdout by default).

    Spans are byte offsets into the decoded (UTF-8) text.
    """
    use_color = bool(get_config().render.get("color", True))
    reader = build_reader(force_encoding, force_version)
    _, decoded = decode_or_exit(gedcom, reader, color=use_color)

    with decoded:
        tree = reader.raw_records(decoded)
        data = tree_to_dict(tree)

    write_json(data, out=out, pretty=pretty)
