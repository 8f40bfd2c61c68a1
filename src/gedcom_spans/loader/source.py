# src/gedcom_spans/loader/source.py

"""
Span-addressed views over GEDCOM input buffers.

Two flavours share every operation:

    RawSource      undecoded bytes, inspected before the encoding is known
    DecodedSource  UTF-8 bytes of the decoded text

All positions are byte offsets. The tokenizer only ever looks for ASCII
delimiters (space, ``@``, CR, LF), which are single bytes in ASCII, ANSEL,
Windows-1252 and UTF-8, so the same code walks both kinds of buffer.
"""

from __future__ import annotations

import mmap
import re
from typing import Iterator, Optional, Tuple, Union

from gedcom_spans.spans import Span

BufferLike = Union[bytes, bytearray, memoryview, mmap.mmap]

_LINE_RE = re.compile(rb"[^\r\n]+")


def _delimiter(char: Union[str, int]) -> bytes:
    if isinstance(char, int):
        return bytes([char])
    encoded = char.encode("ascii")
    if len(encoded) != 1:
        raise ValueError(f"expected a single ASCII character, got {char!r}")
    return encoded


class GedcomSource:
    """
    Common span operations over a byte buffer.

    ``start`` skips a prefix of ``data`` (a byte-order mark) without copying;
    spans are relative to ``data[start:]``.
    """

    def __init__(self, data: BufferLike, start: int = 0) -> None:
        self.data = data
        self.start = start

    # ------------------------------------------------------------------ #
    # Basic access
    # ------------------------------------------------------------------ #

    def __len__(self) -> int:
        return len(self.data) - self.start

    def full_span(self) -> Span:
        return Span(0, len(self))

    def span_of(self, start: int, end: int) -> Span:
        """Return the span ``[start, end)`` after checking it fits the buffer."""
        if start < 0 or end < start or end > len(self):
            raise ValueError(
                f"span [{start}, {end}) is outside the source of length {len(self)}"
            )
        return Span.from_indices(start, end)

    def bytes_at(self, span: Span) -> bytes:
        return bytes(self.data[self.start + span.start : self.start + span.end])

    def text(self, span: Span) -> str:
        raise NotImplementedError

    def is_ascii(self, span: Optional[Span] = None) -> bool:
        span = span or self.full_span()
        return self.bytes_at(span).isascii()

    # ------------------------------------------------------------------ #
    # Span operations used by the tokenizer
    # ------------------------------------------------------------------ #

    def lines(self) -> Iterator[Span]:
        """Yield the span of every non-empty line; CR, LF and CRLF all end a line."""
        for match in _LINE_RE.finditer(self.data, self.start):
            yield Span.from_indices(match.start() - self.start, match.end() - self.start)

    def split_once(self, span: Span, char: Union[str, int]) -> Tuple[Span, Optional[Span]]:
        """
        Split ``span`` at the first occurrence of ``char``.

        Returns ``(before, after)`` where the delimiter belongs to neither;
        ``after`` is None when the delimiter does not occur.
        """
        ix = self.bytes_at(span).find(_delimiter(char))
        if ix < 0:
            return span, None
        at = span.start + ix
        return Span.from_indices(span.start, at), Span.from_indices(at + 1, span.end)

    def starts_with(self, span: Span, char: Union[str, int]) -> bool:
        if span.is_empty():
            return False
        return self.bytes_at(Span(span.start, 1)) == _delimiter(char)

    def ends_with(self, span: Span, char: Union[str, int]) -> bool:
        if span.is_empty():
            return False
        return self.bytes_at(Span(span.end - 1, 1)) == _delimiter(char)

    def slice_from(self, span: Span, n: int) -> Span:
        """Drop the first ``n`` bytes of ``span`` (saturating)."""
        return span.with_start(min(span.start + n, span.end))

    def slice_to(self, span: Span, n: int) -> Span:
        return Span(span.start, min(n, span.length))


class RawSource(GedcomSource):
    """Bytes whose encoding has not been determined yet."""

    def text(self, span: Span) -> str:
        return self.bytes_at(span).decode("ascii", errors="replace")

    def __repr__(self) -> str:
        return f"<RawSource len={len(self)}>"


class DecodedSource(GedcomSource):
    """UTF-8 bytes of decoded GEDCOM text."""

    def text(self, span: Span) -> str:
        return self.bytes_at(span).decode("utf-8")

    def as_str(self) -> str:
        return self.bytes_at(self.full_span()).decode("utf-8")

    @classmethod
    def from_str(cls, text: str) -> "DecodedSource":
        return cls(text.encode("utf-8"))

    def __repr__(self) -> str:
        return f"<DecodedSource len={len(self)}>"
