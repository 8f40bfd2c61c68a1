# src/gedcom_spans/loader/tokenizer.py

"""
Line tokenizer.

Each non-empty physical line is split into::

    <level> [<xref>] <tag> [<value>]

and every piece is returned together with the byte span it came from.
The same code runs over a ``RawSource`` (before the encoding is known,
to find the HEAD record) and over a ``DecodedSource``.

Grammar::

    Line    = Level " " [Xref " "] Tag [" " LineVal]
    Level   = "0" | [1-9][0-9]*
    Xref    = "@" 1*TagChar "@"        ; not "@VOID@"
    Tag     = [A-Z][A-Za-z0-9_]* | "_"[A-Za-z0-9_]+
    LineVal = "@" TagChar+ "@"         ; pointer
            | "@VOID@"                 ; null pointer
            | "@@" AnyChar*            ; literal leading '@' is doubled
            | "@#" AnyChar*            ; GEDCOM 5 escape, e.g. @#DJULIAN@
            | AnyNonAtChar AnyChar*
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

from gedcom_spans.diagnostics.base import GedcomError
from gedcom_spans.spans import Sourced, Span

from .source import GedcomSource

_LEVEL_RE = re.compile(r"0|[1-9][0-9]*")
_STD_TAG_RE = re.compile(r"[A-Z][A-Za-z0-9_]*")
_EXT_TAG_RE = re.compile(r"_[A-Za-z0-9_]+")

VOID_XREF = "@VOID@"


# ---------- Line values ----------

class ValueKind(Enum):
    NONE = "none"
    STR = "str"
    PTR = "ptr"


@dataclass(frozen=True)
class LineValue:
    """
    The payload of a line.

    ``kind`` is NONE for lines without a value, STR for text and PTR for a
    pointer. A PTR whose ``text`` is None is the null pointer ``@VOID@``.
    """

    kind: ValueKind
    text: Optional[str] = None

    @classmethod
    def none(cls) -> "LineValue":
        return cls(ValueKind.NONE)

    @classmethod
    def string(cls, text: str) -> "LineValue":
        return cls(ValueKind.STR, text)

    @classmethod
    def pointer(cls, xref: Optional[str]) -> "LineValue":
        return cls(ValueKind.PTR, xref)

    @property
    def is_none(self) -> bool:
        return self.kind is ValueKind.NONE

    @property
    def is_str(self) -> bool:
        return self.kind is ValueKind.STR

    @property
    def is_ptr(self) -> bool:
        return self.kind is ValueKind.PTR

    @property
    def is_void(self) -> bool:
        return self.kind is ValueKind.PTR and self.text is None

    def __str__(self) -> str:
        if self.kind is ValueKind.NONE:
            return ""
        if self.kind is ValueKind.PTR and self.text is None:
            return VOID_XREF
        return self.text or ""


@dataclass(frozen=True)
class RawLine:
    """
    A tokenized GEDCOM line.

    Attributes:
        tag: The tag, e.g. "HEAD", "INDI", "_CUSTOM".
        xref: Optional cross-reference identifier including its ``@``s, e.g. "@I1@".
        value: The line value; its span is empty (at the end of the tag)
            when the line has no value.
    """

    tag: Sourced[str]
    xref: Optional[Sourced[str]]
    value: Sourced[LineValue]


# ---------- Errors ----------

class LineSyntaxError(GedcomError):
    """Raised when a line does not follow the GEDCOM line grammar."""

    code = "gedcom::parse_error"


class InvalidLevel(LineSyntaxError):
    code = "gedcom::parse_error::invalid_level"

    def __init__(self, value: str, span: Span) -> None:
        super().__init__(
            f"Invalid non-numeric level '{value}'",
            span=span,
            label="this is not a (positive) number",
        )
        self.value = value


class ReservedXRef(LineSyntaxError):
    code = "gedcom::parse_error::reserved_xref"

    def __init__(self, reserved_value: str, span: Span) -> None:
        super().__init__(
            f"Reserved value '{reserved_value}' cannot be used as an XRef",
            span=span,
            label=f"{reserved_value} is a reserved value",
        )
        self.reserved_value = reserved_value


class InvalidXRef(LineSyntaxError):
    code = "gedcom::parse_error::invalid_xref"

    def __init__(self, label: str, span: Span) -> None:
        super().__init__("Invalid XRef", span=span, label=label)


class NoTag(LineSyntaxError):
    code = "gedcom::parse_error::no_tag"

    def __init__(self, span: Span) -> None:
        super().__init__("No tag found", span=span, label="no tag in this line")


class NoSpace(LineSyntaxError):
    code = "gedcom::parse_error::no_space"

    def __init__(self, span: Span) -> None:
        super().__init__(
            "A line should consist of at least two space-separated parts",
            span=span,
            label="no space in this line",
        )


class InvalidTagCharacter(LineSyntaxError):
    code = "gedcom::parse_error::invalid_tag"
    help = (
        "tag names must begin with either an uppercase letter or underscore, "
        "followed by letters or numbers"
    )

    def __init__(self, span: Span) -> None:
        super().__init__(
            "Invalid character in tag",
            span=span,
            label="this character is not permitted in a tag",
        )


class IncompletePointer(LineSyntaxError):
    code = "gedcom::parse_error::incomplete_pointer"

    def __init__(self, span: Span) -> None:
        super().__init__(
            "Incomplete pointer value",
            span=span,
            label="this pointer value should end with '@'",
        )


# ---------- Parsing ----------

def _parse_level(source: GedcomSource, span: Span) -> int:
    raw = source.bytes_at(span)
    if not raw.isascii():
        raise InvalidLevel("<not ascii>", span)

    text = raw.decode("ascii")
    if not _LEVEL_RE.fullmatch(text):
        raise InvalidLevel(text, span)

    level = int(text)
    if level > sys.maxsize:
        raise InvalidLevel(text, span)
    return level


def _check_tag(source: GedcomSource, span: Span) -> str:
    raw = source.bytes_at(span)

    for ix, byte in enumerate(raw):
        if byte >= 0x80:
            raise InvalidTagCharacter(Span(span.start + ix, 1))

    tag = raw.decode("ascii")
    if _STD_TAG_RE.fullmatch(tag) or _EXT_TAG_RE.fullmatch(tag):
        return tag

    # point at the first character that breaks the pattern; a lone "_" fails at 0
    bad = 0
    for ix, char in enumerate(tag):
        if ix == 0:
            ok = char.isupper() or char == "_"
        else:
            ok = char.isalnum() or char == "_"
        if not ok:
            bad = ix
            break
    raise InvalidTagCharacter(Span(span.start + bad, 1))


def _parse_value(source: GedcomSource, span: Span) -> Sourced[LineValue]:
    if not source.starts_with(span, "@"):
        return Sourced(LineValue.string(source.text(span)), span)

    after_at = source.slice_from(span, 1)
    if source.starts_with(after_at, "@"):
        # doubled leading '@' is a literal; the span still covers both
        return Sourced(LineValue.string(source.text(after_at)), span)
    if source.starts_with(after_at, "#"):
        return Sourced(LineValue.string(source.text(span)), span)
    if span.length > 2 and source.ends_with(span, "@"):
        text = source.text(span)
        if text == VOID_XREF:
            return Sourced(LineValue.pointer(None), span)
        return Sourced(LineValue.pointer(text), span)

    raise IncompletePointer(span)


def parse_line(source: GedcomSource, line: Span) -> Tuple[Sourced[int], Sourced[RawLine]]:
    """
    Parse the line occupying ``line`` in ``source``.

    Raises a ``LineSyntaxError`` subclass describing the first problem found.
    """
    level_span, rest = source.split_once(line, " ")
    if rest is None:
        raise NoTag(line)

    level = Sourced(_parse_level(source, level_span), level_span)

    # --- optional xref ---------------------------------------------------
    xref: Optional[Sourced[str]] = None
    if source.starts_with(rest, "@"):
        inner, after = source.split_once(source.slice_from(rest, 1), "@")
        if after is None:
            raise NoSpace(line)

        xref_span = Span.from_indices(rest.start, inner.end + 1)
        if inner.is_empty():
            raise InvalidXRef(
                "an XRef needs at least one character between its '@'s", xref_span
            )
        if source.bytes_at(inner) == b"VOID":
            raise ReservedXRef("VOID", xref_span)
        if after.is_empty():
            raise NoTag(line)
        if not source.starts_with(after, " "):
            raise InvalidXRef("this XRef should be followed by a space", xref_span)

        xref = Sourced(source.text(xref_span), xref_span)
        rest = source.slice_from(after, 1)

    # --- tag and value ---------------------------------------------------
    tag_span, value_span = source.split_once(rest, " ")
    if tag_span.is_empty():
        raise NoTag(line)

    tag = Sourced(_check_tag(source, tag_span), tag_span)

    if value_span is None:
        value = Sourced(LineValue.none(), Span(tag_span.end, 0))
    else:
        value = _parse_value(source, value_span)

    return level, Sourced(RawLine(tag=tag, xref=xref, value=value), line)


def iterate_lines(source: GedcomSource) -> Iterator[Tuple[Sourced[int], Sourced[RawLine]]]:
    """
    Lazily tokenize every non-empty line of ``source``.

    Yields ``(level, line)`` pairs. A malformed line raises its
    ``LineSyntaxError`` at the point it is reached; the caller decides
    whether to stop or to report and give up on the rest of the input.
    """
    for line_span in source.lines():
        yield parse_line(source, line_span)
