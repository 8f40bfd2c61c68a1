# src/gedcom_spans/encodings/types.py

"""
Encodings and the reasons an encoding was chosen.

``Encoding`` lists the byte encodings the reader can decode.
``GedcomEncoding`` lists the names a GEDCOM 5.x header may give in its
``HEAD.CHAR`` record; ``UNICODE`` is ambiguous between the two UTF-16
byte orders and has to be settled by looking at the bytes themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from gedcom_spans.diagnostics.base import Diagnostic, Severity
from gedcom_spans.spans import Span

if TYPE_CHECKING:
    from gedcom_spans.versions import KnownVersion


class Encoding(Enum):
    """Byte encodings the reader can decode."""

    ASCII = "ASCII"
    ANSEL = "ANSEL"
    UTF8 = "UTF-8"
    UTF16BE = "UTF-16 (big-endian)"
    UTF16LE = "UTF-16 (little-endian)"
    # not permitted by any GEDCOM version, but common in mis-encoded files
    WINDOWS1252 = "Windows-1252"

    def __str__(self) -> str:
        return self.value

    @property
    def codec(self) -> Optional[str]:
        """Name of the Python codec for this encoding (None for ANSEL)."""
        return _CODECS[self]

    @property
    def bom(self) -> bytes:
        """The byte-order mark this encoding may start with (empty if none)."""
        return _BOMS.get(self, b"")

    @classmethod
    def from_name(cls, name: str) -> "Encoding":
        """
        Look up an encoding by a user-supplied name such as ``utf-8``,
        ``UTF16LE`` or ``windows-1252`` (case and punctuation insensitive).
        """
        key = "".join(ch for ch in name.lower() if ch.isalnum())
        try:
            return _ALIASES[key]
        except KeyError:
            known = ", ".join(sorted(_ALIASES))
            raise ValueError(f"unknown encoding {name!r} (expected one of: {known})") from None


_CODECS = {
    Encoding.ASCII: "ascii",
    Encoding.ANSEL: None,
    Encoding.UTF8: "utf-8",
    Encoding.UTF16BE: "utf-16-be",
    Encoding.UTF16LE: "utf-16-le",
    Encoding.WINDOWS1252: "cp1252",
}

_BOMS = {
    Encoding.UTF8: b"\xef\xbb\xbf",
    Encoding.UTF16BE: b"\xfe\xff",
    Encoding.UTF16LE: b"\xff\xfe",
}

_ALIASES = {
    "ascii": Encoding.ASCII,
    "ansel": Encoding.ANSEL,
    "utf8": Encoding.UTF8,
    "utf16be": Encoding.UTF16BE,
    "utf16le": Encoding.UTF16LE,
    "windows1252": Encoding.WINDOWS1252,
    "cp1252": Encoding.WINDOWS1252,
}


class GedcomEncoding(Enum):
    """Encoding names that may appear in a GEDCOM 5.x ``HEAD.CHAR`` record."""

    ASCII = "ASCII"
    ANSEL = "ANSEL"
    UTF8 = "UTF-8"
    UNICODE = "UNICODE"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: bytes) -> Optional["GedcomEncoding"]:
        """Return the encoding named by ``raw`` exactly, or None."""
        if not raw.isascii():
            return None
        try:
            return cls(raw.decode("ascii"))
        except ValueError:
            return None

    def candidates(self) -> Tuple[Encoding, ...]:
        """The byte encodings this header name may denote."""
        if self is GedcomEncoding.UNICODE:
            return (Encoding.UTF16LE, Encoding.UTF16BE)
        return (_BY_HEADER_NAME[self],)

    def resolve(self) -> Optional[Encoding]:
        """The single byte encoding this name denotes, or None when ambiguous."""
        candidates = self.candidates()
        return candidates[0] if len(candidates) == 1 else None


_BY_HEADER_NAME = {
    GedcomEncoding.ASCII: Encoding.ASCII,
    GedcomEncoding.ANSEL: Encoding.ANSEL,
    GedcomEncoding.UTF8: Encoding.UTF8,
}


# ---------- Reasons ----------

class EncodingReason(Diagnostic):
    """Why a particular encoding was chosen; reported as advice."""

    severity = Severity.ADVICE
    bom_length = 0

    def __str__(self) -> str:
        return self.message()


@dataclass(frozen=True)
class BOMDetected(EncodingReason):
    bom_length: int

    code = "gedcom::encoding_reason::bom"

    def message(self) -> str:
        return "this encoding was detected from the byte-order mark (BOM) at the start of the file"


@dataclass(frozen=True)
class Sniffed(EncodingReason):
    code = "gedcom::encoding_reason::sniffed"

    def message(self) -> str:
        return (
            "this encoding was detected from the start of the file content "
            "(no byte-order mark was present)"
        )


@dataclass(frozen=True)
class SpecifiedInHeader(EncodingReason):
    span: Span

    code = "gedcom::encoding_reason::header"

    def message(self) -> str:
        return "this encoding was used because it was specified in the GEDCOM header"

    def labels(self) -> List[Tuple[Span, str]]:
        return [(self.span, "encoding was set here")]


@dataclass(frozen=True)
class DeterminedByVersion(EncodingReason):
    version: "KnownVersion"
    span: Optional[Span] = None

    code = "gedcom::encoding_reason::version"

    def message(self) -> str:
        suffix = ""
        if self.span is None:
            suffix = " (this version was selected explicitly in the options)"
        return f"this encoding is required by GEDCOM version {self.version}{suffix}"

    def labels(self) -> List[Tuple[Span, str]]:
        if self.span is None:
            return []
        return [(self.span, "version was set here")]


@dataclass(frozen=True)
class Assumed(EncodingReason):
    code = "gedcom::encoding_reason::assumed"

    def message(self) -> str:
        return (
            "an encoding was not detected in the GEDCOM file, "
            "so was assumed based upon provided parsing options"
        )


@dataclass(frozen=True)
class Forced(EncodingReason):
    code = "gedcom::encoding_reason::forced"

    def message(self) -> str:
        return "this encoding was selected explicitly in the parsing options"
