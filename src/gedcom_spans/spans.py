# src/gedcom_spans/spans.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Span:
    """
    A half-open byte range ``[offset, offset + length)`` into a source buffer.

    Spans are plain values: they do not know which buffer they belong to.
    Zero-length spans are legal and mark positions (e.g. a missing value).
    """

    offset: int
    length: int

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"span offset must not be negative: {self.offset}")
        if self.length < 0:
            raise ValueError(f"span length must not be negative: {self.length}")

    @classmethod
    def from_indices(cls, start: int, end: int) -> "Span":
        return cls(start, max(end - start, 0))

    @property
    def start(self) -> int:
        return self.offset

    @property
    def end(self) -> int:
        return self.offset + self.length

    def len(self) -> int:
        return self.length

    def is_empty(self) -> bool:
        return self.length == 0

    def contains(self, other: "Span") -> bool:
        """True when ``other`` lies entirely within this span."""
        return self.start <= other.start and other.end <= self.end

    def contains_offset(self, ix: int) -> bool:
        return self.start <= ix < self.end

    def with_start(self, ix: int) -> "Span":
        """Move the start to ``ix`` keeping the end fixed (saturating)."""
        return Span.from_indices(ix, self.end)

    def with_end(self, ix: int) -> "Span":
        return Span.from_indices(self.start, ix)

    def shifted(self, delta: int) -> "Span":
        return Span(max(self.offset + delta, 0), self.length)

    def __repr__(self) -> str:
        return f"Span({self.offset}, {self.length})"


@dataclass(frozen=True)
class Sourced(Generic[T]):
    """A value paired with the span it was read from."""

    value: T
    span: Span


@dataclass(frozen=True)
class MaybeSourced(Generic[T]):
    """A value that may have come from the source, or from elsewhere (``span`` is None)."""

    value: T
    span: Optional[Span] = None
