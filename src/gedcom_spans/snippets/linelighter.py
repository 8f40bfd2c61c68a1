# src/gedcom_spans/snippets/linelighter.py

"""
Highlighting of a single source line.

Given the labels that lie on one line (sorted by start, longest first),
produce three things:

    line       the source text, each range in the style of the innermost label
    indicator  box-drawing marks under every labelled range
    messages   one row per label, hanging under the label's start

Labels are processed with a stack: when a label starts, every open label
is cut off at that point, and re-opened afterwards if it continues past
the new label's end.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from rich.cells import cell_len
from rich.style import Style
from rich.text import Text

from gedcom_spans.spans import Span

from .label import Label

# "└╴" at the start of every message
MSG_PREFIX_WIDTH = 2

_ASCII_WHITESPACE = b" \t\n\x0c\r"


def slice_text(source: bytes, start: int, end: int) -> str:
    return source[start:end].decode("utf-8", errors="replace")


def trim_ascii_end(value: bytes) -> bytes:
    return value.rstrip(_ASCII_WHITESPACE)


@dataclass
class LitLine:
    line: Text
    indicator_line: Text
    messages: List[Text] = field(default_factory=list)


class LineHighlighter:
    def __init__(self, source: bytes) -> None:
        self.source = source
        self.line = Text()
        self.indicator_line = Text()
        self.messages: List[Text] = []

    def _width_between(self, start: int, end: int) -> int:
        return cell_len(slice_text(self.source, start, end))

    # ------------------------------------------------------------------ #
    # Indicator
    # ------------------------------------------------------------------ #

    def fill_indicator(self, continuing: bool, continues: bool, value: str, style: Style) -> None:
        width = cell_len(value)
        if width == 0:
            glyph = "│"
        elif width == 1:
            if continuing and continues:
                glyph = "╌"
            elif continuing:
                glyph = "┘"
            elif continues:
                glyph = "├"
            else:
                glyph = "╿"
        else:
            glyph = (
                ("╶" if continuing else "├")
                + "─" * (width - 2)
                + ("╴" if continues else "┘")
            )
        self.indicator_line.append(glyph, style)

    # ------------------------------------------------------------------ #
    # Messages
    # ------------------------------------------------------------------ #

    def _fill_holes(
        self,
        line_start: int,
        label: Label,
        others: Sequence[Label],
        line_offset: int,
        text: str,
        out: Text,
        bright: bool,
        char: str,
    ) -> None:
        """
        Append ``text`` in the label's style, replacing each space that sits
        directly above the start of a later label with ``char`` in that
        label's style.
        """
        building = ""
        for ix, ch in enumerate(text):
            if ch == " ":
                offset_to_space = line_offset + cell_len(text[:ix])
                other_style = self._style_starting_at(line_start, others, offset_to_space)
                if other_style is not None:
                    out.append(building, label.style)
                    building = ""
                    if not bright and other_style:
                        other_style = other_style + Style(dim=True)
                    out.append(char, other_style)
                    continue
            building += ch

        if building:
            out.append(building, label.style)

    def _style_starting_at(
        self, line_start: int, others: Sequence[Label], column: int
    ) -> Optional[Style]:
        for other in others:
            if self._width_between(line_start, other.start) == column:
                return other.style
        return None

    def emit_message(self, line_span: Span, label: Label, others: Sequence[Label]) -> None:
        line_start = line_span.start
        indent_width = self._width_between(line_start, label.start)

        out = Text()
        self._fill_holes(line_start, label, others, 0, " " * indent_width, out, True, "│")
        out.append("└╴", label.style)

        # full brightness only where the row touches the indicator line
        bright = not self.messages
        self._fill_holes(
            line_start,
            label,
            others,
            indent_width + MSG_PREFIX_WIDTH,
            label.message,
            out,
            bright,
            "╵",
        )

        # draw in any labels whose messages come later
        total_width = indent_width + MSG_PREFIX_WIDTH + cell_len(label.message)
        for other in others:
            offset_from_start = self._width_between(line_start, other.start)
            gap = offset_from_start - total_width
            if gap >= 0:
                if gap > 0:
                    out.append(" " * gap)
                out.append("│", other.style)
                total_width += gap + 1

        self.messages.append(out)

    # ------------------------------------------------------------------ #
    # Line
    # ------------------------------------------------------------------ #

    def highlight_line(self, line_span: Span, labels: Sequence[Label]) -> LitLine:
        stack: List[Label] = []
        message_order: List[Label] = []

        up_to = line_span.start
        for label in labels:
            if label.start > up_to:
                while stack:
                    outer = stack.pop()
                    wanted_end = outer.end
                    end = min(wanted_end, label.start)

                    value = slice_text(self.source, up_to, end)
                    self.line.append(value, outer.style)

                    continuing = outer.start < up_to
                    continues = wanted_end > label.end
                    self.fill_indicator(continuing, continues, value, outer.style)

                    if continues:
                        stack.append(outer)
                    else:
                        message_order.append(outer)

                    up_to = end
                    if up_to == label.start:
                        break

                # unhighlighted gap before the next label
                if label.start > up_to:
                    value = slice_text(self.source, up_to, label.start)
                    self.line.append(value)
                    self.indicator_line.append(" " * cell_len(value))
                    up_to = label.start

            stack.append(label)

        while stack:
            label = stack.pop()
            end = label.end
            if end < up_to:
                # fully covered by a later label
                message_order.append(label)
                continue

            value = slice_text(self.source, up_to, end)
            continuing = label.start < up_to
            self.fill_indicator(continuing, False, value, label.style)
            self.line.append(value, label.style)
            message_order.append(label)
            up_to = end

        if up_to < line_span.end:
            rest = trim_ascii_end(self.source[up_to : line_span.end])
            self.line.append(rest.decode("utf-8", errors="replace"))

        for ix, label in enumerate(message_order):
            self.emit_message(line_span, label, message_order[ix + 1 :])

        return LitLine(self.line, self.indicator_line, self.messages)
