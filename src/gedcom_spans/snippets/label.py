# src/gedcom_spans/snippets/label.py

from __future__ import annotations

from dataclasses import dataclass, field, replace

from rich.style import Style

from gedcom_spans.spans import Span


@dataclass(frozen=True)
class Label:
    """A message attached to a byte span of the source being rendered."""

    span: Span
    message: str
    style: Style = field(default_factory=Style)
    # set on the closing half of a label that covers several lines
    is_multiline_end: bool = False

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    def into_multiline_end(self) -> "Label":
        return replace(self, span=Span(self.span.end, 0), is_multiline_end=True)
