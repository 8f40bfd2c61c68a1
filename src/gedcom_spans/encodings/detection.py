# src/gedcom_spans/encodings/detection.py

"""
External encoding detection and decoding.

"External" detection looks only at the first bytes of the input (byte-order
marks and the shape of a leading ``0``); it never parses records. When it
cannot decide, the caller falls back to reading ``HEAD.CHAR`` from the raw
bytes (see ``gedcom_spans.versions``).
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import List, Optional, Tuple

from gedcom_spans.diagnostics.base import Diagnostic
from gedcom_spans.loader.source import BufferLike, DecodedSource, RawSource
from gedcom_spans.loader.tokenizer import LineSyntaxError, parse_line
from gedcom_spans.logging import get_logger
from gedcom_spans.spans import Span

from .ansel import AnselError, decode_ansel
from .errors import (
    InvalidBOM,
    InvalidDataForEncoding,
    MultiVolumeFragment,
    NotGedcomFile,
    PossibleEncodings,
)
from .types import BOMDetected, Encoding, EncodingReason, Sniffed

log = get_logger(__name__)

# the longest first line that is still quoted in a NotGedcomFile label
_MAX_QUOTED_LINE = 100

# ASCII failure window: letters before the bad byte, candidate bytes from it
_WINDOW_BEFORE = 20
_WINDOW_AFTER = 21


@dataclass(frozen=True)
class DetectedEncoding:
    """An encoding together with the reason it was chosen."""

    encoding: Encoding
    reason: EncodingReason

    @property
    def bom_length(self) -> int:
        return self.reason.bom_length

    def decode(self, data: BufferLike) -> Tuple[DecodedSource, bool]:
        """
        Decode ``data`` (with any byte-order mark) into UTF-8 text.

        Returns ``(source, borrowed)``. When ``borrowed`` is True the source
        shares ``data`` and only skips the BOM; otherwise it owns a new
        buffer.

        Raises:
            InvalidDataForEncoding: if the bytes are not valid in the encoding.
                Its span points into ``data``.
        """
        log.debug(f"Decoding {len(data)} bytes as {self.encoding}")
        bom = self.bom_length
        mark = self.encoding.bom
        # a forced encoding may still be preceded by its BOM
        if not bom and mark and bytes(data[: len(mark)]) == mark:
            bom = len(mark)

        if self.encoding is Encoding.ASCII:
            return self._decode_ascii(data, bom)
        if self.encoding is Encoding.UTF8:
            return self._decode_utf8(data, bom)
        if self.encoding is Encoding.ANSEL:
            return self._decode_ansel(data, bom)
        return self._decode_codec(data, bom)

    # ------------------------------------------------------------------ #
    # Per-encoding helpers
    # ------------------------------------------------------------------ #

    def _decode_ascii(self, data: BufferLike, bom: int) -> Tuple[DecodedSource, bool]:
        raw = bytes(data[bom:])
        if raw.isascii():
            return DecodedSource(data, bom), True

        valid_up_to = next(ix for ix, byte in enumerate(raw) if byte >= 0x80)
        reasons: List[Diagnostic] = [self.reason]

        candidates = _possible_encodings(raw, valid_up_to)
        if candidates:
            reasons.append(PossibleEncodings(candidates))

        raise InvalidDataForEncoding(self.encoding, Span(bom + valid_up_to, 1), reasons)

    def _decode_utf8(self, data: BufferLike, bom: int) -> Tuple[DecodedSource, bool]:
        raw = bytes(data[bom:])
        try:
            raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            span = Span(bom + exc.start, max(exc.end - exc.start, 1))
            raise InvalidDataForEncoding(
                self.encoding, span, [self.reason], detail=exc.reason
            ) from exc
        return DecodedSource(data, bom), True

    def _decode_ansel(self, data: BufferLike, bom: int) -> Tuple[DecodedSource, bool]:
        try:
            text, borrowed = decode_ansel(data[bom:])
        except AnselError as exc:
            raise InvalidDataForEncoding(
                self.encoding, Span(bom + exc.offset, 1), [self.reason], detail=str(exc)
            ) from exc

        if borrowed:
            return DecodedSource(data, bom), True
        return DecodedSource.from_str(text), False

    def _decode_codec(self, data: BufferLike, bom: int) -> Tuple[DecodedSource, bool]:
        raw = bytes(data[bom:])
        try:
            text = raw.decode(self.encoding.codec, errors="strict")
        except UnicodeDecodeError as exc:
            span = Span(bom + exc.start, max(exc.end - exc.start, 1))
            raise InvalidDataForEncoding(
                self.encoding, span, [self.reason], detail=exc.reason
            ) from exc
        return DecodedSource.from_str(text), False


def _possible_encodings(raw: bytes, valid_up_to: int) -> List[Tuple[Encoding, str]]:
    """Try a window of bytes around a failure in other encodings."""
    before = bytearray()
    for byte in reversed(raw[max(valid_up_to - _WINDOW_BEFORE, 0) : valid_up_to]):
        if not chr(byte).isalpha():
            break
        before.insert(0, byte)

    after = bytearray()
    for byte in raw[valid_up_to : valid_up_to + _WINDOW_AFTER]:
        if byte < 0x80 and not chr(byte).isalpha():
            break
        after.append(byte)

    window = bytes(before + after)
    log.debug(f"Data failed to decode as ASCII: {window!r}")

    candidates = []
    for encoding in (Encoding.WINDOWS1252, Encoding.UTF8):
        try:
            text = window.decode(encoding.codec)
        except UnicodeDecodeError:
            log.debug(f"Window is not valid {encoding}")
            continue
        if any(unicodedata.category(ch) == "Cc" for ch in text):
            continue
        candidates.append((encoding, text))
    return candidates


def _is_valid_line(source: RawSource, span: Span) -> bool:
    try:
        parse_line(source, span)
    except LineSyntaxError:
        return False
    return True


def detect_external_encoding(data: BufferLike) -> Optional[DetectedEncoding]:
    """
    Decide the encoding from the first bytes of ``data`` alone.

    Returns None when the file starts ``0 HEAD`` in an ASCII-compatible
    encoding, meaning the header has to be read to find the encoding.

    Raises:
        InvalidBOM: for a UTF-32 byte-order mark.
        MultiVolumeFragment: when the first line is a valid GEDCOM line but
            not ``0 HEAD``.
        NotGedcomFile: otherwise.
    """
    head = bytes(data[:7])

    if head.startswith(b"\x00\x00\xfe\xff"):
        raise InvalidBOM("UTF-32 (big-endian)")
    if head.startswith(b"\xff\xfe\x00\x00"):
        raise InvalidBOM("UTF-32 (little-endian)")

    if head.startswith(b"\xef\xbb\xbf"):
        return DetectedEncoding(Encoding.UTF8, BOMDetected(3))
    if head.startswith(b"\xff\xfe"):
        return DetectedEncoding(Encoding.UTF16LE, BOMDetected(2))
    if head.startswith(b"\xfe\xff"):
        return DetectedEncoding(Encoding.UTF16BE, BOMDetected(2))

    if head.startswith(b"0\x00"):
        return DetectedEncoding(Encoding.UTF16LE, Sniffed())
    if head.startswith(b"\x000"):
        return DetectedEncoding(Encoding.UTF16BE, Sniffed())

    if head in (b"0 HEAD\r", b"0 HEAD\n"):
        return None

    source = RawSource(data)
    first_line = next(source.lines(), None)
    line_len = 0
    if first_line is not None and first_line.start == 0:
        line_len = first_line.length
    quoted = Span(0, line_len if line_len < _MAX_QUOTED_LINE else 0)

    if line_len and _is_valid_line(source, first_line):
        raise MultiVolumeFragment(quoted)

    raise NotGedcomFile(quoted)
