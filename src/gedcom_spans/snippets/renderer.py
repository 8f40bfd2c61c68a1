# src/gedcom_spans/snippets/renderer.py

"""
Render labels against source text as an annotated listing.

Output shape::

      ┌
    1 │ hello, world!
      │ ├───┘
      │ └╴here
      └

Each row is prefixed by a gutter (1-based line number, or blank for rows
that are not source lines) and a ruler column. The ruler turns into a
heavy line (``┃``) while a label covering several lines is open; such a
label's message is printed below the line where it ends.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from rich.cells import cell_len
from rich.console import Console
from rich.text import Text

from gedcom_spans.spans import Span

from .label import Label
from .linelighter import LineHighlighter, trim_ascii_end

ELISION = "…"


@dataclass
class _Row:
    line_number: Optional[int]  # 0-based; None for supplementary rows
    text: Text
    multi_count: int


def sort_labels(labels: List[Label]) -> None:
    """
    Sort in place by start, longest first among equal starts, then reverse
    so that ``pop()`` yields the next label to draw.
    """
    labels.sort(key=lambda label: (label.start, -label.span.length), reverse=True)


def _floor_boundary(source: bytes, ix: int) -> int:
    ix = min(ix, len(source))
    while 0 < ix < len(source) and (source[ix] & 0xC0) == 0x80:
        ix -= 1
    return ix


def _ceil_boundary(source: bytes, ix: int) -> int:
    ix = min(ix, len(source))
    while ix < len(source) and (source[ix] & 0xC0) == 0x80:
        ix += 1
    return ix


def _split_inclusive(data: bytes) -> List[bytes]:
    parts = data.split(b"\n")
    pieces = [part + b"\n" for part in parts[:-1]]
    if parts[-1]:
        pieces.append(parts[-1])
    return pieces


def _ruler(last_multi_count: int, multi_count: int) -> Tuple[str, str]:
    """Ruler for a row and for its wrapped continuation rows."""
    if last_multi_count == 0 and multi_count == 0:
        return "│ ", "│ "
    if last_multi_count == 0:
        return "┢╸", "┃ "
    if multi_count == 0:
        return "┡━╸", "│  "
    if last_multi_count < multi_count:
        return "┣╸", "┃ "
    if last_multi_count == multi_count:
        return "┃ ", "┃ "
    return "┣━╸", "┃  "


def layout_console() -> Console:
    # only used to lay out text; never printed to
    return Console(width=10_000, color_system="truecolor", force_terminal=True)


def to_ansi(text: Text, console: Console) -> str:
    return "".join(
        segment.style.render(segment.text) if segment.style else segment.text
        for segment in text.render(console)
    )


class LabelRenderer:
    """
    Lays out labels over a source buffer.

    ``source`` may be text or bytes; label spans are byte offsets into its
    UTF-8 encoding (or into the bytes as given). Spans are clamped to the
    buffer and widened to whole characters.
    """

    def __init__(
        self,
        source: Union[str, bytes],
        source_name: Optional[str] = None,
        *,
        context_lines: int = 2,
        max_width: Optional[int] = None,
    ) -> None:
        self.source = source.encode("utf-8") if isinstance(source, str) else bytes(source)
        self.source_name = source_name
        self.context_lines = context_lines
        self.max_width = max_width
        self.console = layout_console()

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _snap(self, label: Label) -> Label:
        start = _floor_boundary(self.source, label.start)
        end = max(_ceil_boundary(self.source, label.end), start)
        return Label(Span.from_indices(start, end), label.message, label.style)

    def line_containing_start_of(self, span: Span) -> Span:
        start_of_line = self.source.rfind(b"\n", 0, span.start) + 1
        newline = self.source.find(b"\n", span.start)
        end_of_line = newline + 1 if newline >= 0 else len(self.source)
        return Span.from_indices(start_of_line, end_of_line)

    def _on_line(self, line_span: Span, offset: int) -> bool:
        if line_span.contains_offset(offset):
            return True
        # the end of a last line that has no newline still belongs to it
        return offset == line_span.end == len(self.source) and not self.source.endswith(b"\n")

    def _context_row(self, line_number: int, raw: bytes, multi_count: int) -> _Row:
        text = Text(trim_ascii_end(raw).decode("utf-8", errors="replace"))
        return _Row(line_number, text, multi_count)

    # ------------------------------------------------------------------ #
    # Layout
    # ------------------------------------------------------------------ #

    def generate_rows(self, labels: Iterable[Label]) -> List[_Row]:
        pending = [self._snap(label) for label in labels]
        sort_labels(pending)

        multi_count = 0  # open labels covering several lines
        last_line: Optional[int] = None
        rows: List[_Row] = []
        context_after: List[_Row] = []

        while pending:
            label = pending.pop()
            line_labels: List[Label] = []
            ending_multis: List[Label] = []

            line_span = self.line_containing_start_of(label.span)
            if label.is_multiline_end:
                ending_multis.append(label)
            elif label.end > line_span.end:
                multi_count += 1
                pending.append(label.into_multiline_end())
                sort_labels(pending)
            else:
                line_labels.append(label)

            line_number = self.source.count(b"\n", 0, line_span.start)

            # context after the previous labelled line
            for row in context_after:
                if row.line_number < line_number:
                    rows.append(row)
                    last_line = row.line_number
            context_after = []

            if last_line is not None:
                before_count = min(self.context_lines, max(line_number - last_line - 1, 0))
                if line_number - before_count > last_line + 1:
                    rows.append(_Row(None, Text(ELISION), multi_count))
            else:
                before_count = self.context_lines
            last_line = line_number

            # every other label starting on this line
            while pending and self._on_line(line_span, pending[-1].start):
                line_label = pending.pop()
                if line_label.end > line_span.end:
                    multi_count += 1
                    pending.append(line_label.into_multiline_end())
                    sort_labels(pending)
                elif line_label.is_multiline_end:
                    ending_multis.append(line_label)
                else:
                    line_labels.append(line_label)

            # context before
            before = _split_inclusive(self.source[: line_span.start])
            if before_count:
                for offset, raw in enumerate(before[-before_count:]):
                    number = line_number - min(before_count, len(before)) + offset
                    rows.append(self._context_row(number, raw, multi_count))

            multis_after = multi_count - len(ending_multis)
            after = _split_inclusive(self.source[line_span.end :])[: self.context_lines]
            context_after = [
                self._context_row(line_number + offset + 1, raw, multis_after)
                for offset, raw in enumerate(after)
            ]

            lit = LineHighlighter(self.source).highlight_line(line_span, line_labels)
            rows.append(_Row(line_number, lit.line, multi_count))
            if lit.indicator_line.plain:
                rows.append(_Row(None, lit.indicator_line, multi_count))
            for message in lit.messages:
                rows.append(_Row(None, message, multi_count))

            for ending in ending_multis:
                multi_count -= 1
                rows.append(_Row(None, Text(ending.message, style=ending.style), multi_count))

        rows.extend(context_after)
        return rows

    def _wrap(self, text: Text, first: str, rest: str) -> List[Text]:
        if self.max_width is None:
            pieces = list(text.split("\n", allow_blank=True))
        else:
            width = max(self.max_width - cell_len(first), 1)
            pieces = list(text.wrap(self.console, width))

        lines = []
        for ix, piece in enumerate(pieces):
            line = Text(first if ix == 0 else rest)
            line.append_text(piece)
            line.rstrip()
            lines.append(line)
        return lines

    def render_lines(self, labels: Sequence[Label]) -> List[Text]:
        """Lay out ``labels`` and return the styled output lines."""
        rows = self.generate_rows(labels)
        if not rows:
            return []

        highest = max(row.line_number for row in rows if row.line_number is not None)
        gutter = len(str(highest + 1))
        blank = " " * gutter

        out: List[Text] = []
        if self.source_name is not None:
            name_width = cell_len(self.source_name)
            out.append(Text(f"{blank} ┌─{'─' * name_width}─┐"))
            out.append(Text(f"{blank} │ {self.source_name} │"))
            out.append(Text(f"{blank} ├─{'─' * name_width}─╯"))
        else:
            out.append(Text(f"{blank} ┌"))

        last_multi_count = 0
        for row in rows:
            ruler, continuation = _ruler(last_multi_count, row.multi_count)
            last_multi_count = row.multi_count

            number = blank if row.line_number is None else str(row.line_number + 1).rjust(gutter)
            out.extend(self._wrap(row.text, f"{number} {ruler}", f"{blank} {continuation}"))

        out.append(Text(f"{blank} └"))
        return out

    def render(self, labels: Sequence[Label], *, color: bool = True) -> str:
        """Render to a string, with ANSI styles unless ``color`` is False."""
        lines = self.render_lines(labels)
        if color:
            return "".join(to_ansi(line, self.console) + "\n" for line in lines)
        return "".join(line.plain + "\n" for line in lines)
