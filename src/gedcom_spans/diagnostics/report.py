# src/gedcom_spans/diagnostics/report.py

"""
Human-readable presentation of diagnostics.

    × Error [gedcom::record_error::invalid_child_level]
      Invalid child level 2, expected 1 or less
        ┌
      1 │ 0 HEAD
      2 │ 2 TAG
        │ ╿
        │ └╴this should be less than or equal to 1
        └

Related diagnostics follow their parent, indented one level.
"""

from __future__ import annotations

from itertools import cycle
from typing import Iterator, List, Optional, Union

from rich.cells import cell_len
from rich.style import Style
from rich.text import Text

from gedcom_spans.loader.source import GedcomSource
from gedcom_spans.snippets import Label, LabelRenderer
from gedcom_spans.snippets.renderer import layout_console, to_ansi

from .base import Diagnostic, Severity

SourceLike = Union[str, bytes, GedcomSource]

# 'light' qualitative palette, cycled through for label colours
LABEL_PALETTE = (
    "#77AADD",
    "#EE8866",
    "#EEDD88",
    "#99DDFF",
    "#FFAABB",
    "#44BB99",
    "#BBCC33",
    "#AAAA00",
)

_SEVERITY_DISPLAY = {
    Severity.ERROR: ("×", "Error", "red"),
    Severity.WARNING: ("⚠", "Warning", "yellow"),
    Severity.ADVICE: ("☞", "Advice", "cyan"),
}

INDENT = "  "


def _source_bytes(source: Optional[SourceLike]) -> Optional[bytes]:
    if source is None:
        return None
    if isinstance(source, GedcomSource):
        return source.bytes_at(source.full_span())
    if isinstance(source, str):
        return source.encode("utf-8")
    return bytes(source)


def _styled(text: str, style: Style, color: bool) -> str:
    return style.render(text) if color else text


class _Presenter:
    def __init__(
        self,
        source_name: Optional[str],
        color: bool,
        width: Optional[int],
        context_lines: int,
    ) -> None:
        self.source_name = source_name
        self.color = color
        self.width = width
        self.context_lines = context_lines
        self._palette: Iterator[str] = cycle(LABEL_PALETTE)
        self.console = layout_console()

    def _label_style(self) -> Style:
        return Style(color=next(self._palette)) if self.color else Style()

    def _wrap(self, text: Text, prefix: str) -> List[str]:
        lines: List[str] = []
        for paragraph in text.split("\n", allow_blank=True):
            if self.width is None:
                pieces = [paragraph]
            else:
                width = max(self.width - cell_len(prefix), 1)
                pieces = list(paragraph.wrap(self.console, width)) or [Text()]
            for piece in pieces:
                piece.rstrip()
                rendered = to_ansi(piece, self.console) if self.color else piece.plain
                lines.append(prefix + rendered)
        return lines

    def present(self, diag: Diagnostic, source: Optional[bytes], depth: int) -> List[str]:
        symbol, name, colour = _SEVERITY_DISPLAY[diag.severity]
        base = Style(color=colour)
        prefix = INDENT * depth

        header = f"{_styled(symbol, base, self.color)} {_styled(name, base + Style(bold=True), self.color)}"
        lines = [f"{prefix}{header} [{diag.code}]"]
        lines.extend(self._wrap(Text(diag.message()), prefix + INDENT))

        # errors raised while reading a header carry their own buffer
        own_source = getattr(diag, "source", None)
        if isinstance(own_source, GedcomSource):
            source = _source_bytes(own_source)

        labels = [
            Label(span, text, self._label_style()) for span, text in diag.labels()
        ]
        if labels and source is not None:
            renderer = LabelRenderer(
                source,
                self.source_name,
                context_lines=self.context_lines,
                max_width=(self.width - len(prefix) - len(INDENT)) if self.width else None,
            )
            snippet = renderer.render(labels, color=self.color)
            lines.extend(prefix + INDENT + line for line in snippet.splitlines())

        if diag.help:
            help_text = Text.assemble(("help:", Style(bold=True)), f" {diag.help}")
            lines.extend(self._wrap(help_text, prefix + INDENT))

        for related in diag.related():
            lines.extend(self.present(related, source, depth + 1))

        return lines


def render_diagnostic(
    diag: Diagnostic,
    source: Optional[SourceLike] = None,
    source_name: Optional[str] = None,
    *,
    color: bool = True,
    width: Optional[int] = None,
    context_lines: int = 2,
) -> str:
    """
    Render ``diag`` (and its related diagnostics) as text.

    Args:
        diag: The diagnostic to show.
        source: The buffer its spans point into. Labels are skipped when
            neither this nor the diagnostic's own ``source`` is available.
        source_name: Shown in a box above each snippet.
        color: Emit ANSI styles.
        width: Wrap messages and snippets to this many columns.
        context_lines: Unlabelled lines shown around each labelled line.
    """
    presenter = _Presenter(source_name, color, width, context_lines)
    return "\n".join(presenter.present(diag, _source_bytes(source), 0)) + "\n"
