# src/gedcom_spans/versions.py

"""
GEDCOM versions, and the rules tying a version to its permitted encodings.

The version of a file is read from ``HEAD.GEDC.VERS``. For 5.x files the
encoding is then read from ``HEAD.CHAR`` and checked against both the
bytes (BOM / sniffing) and the version; 7.0 files are always UTF-8.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from gedcom_spans.diagnostics.base import GedcomError, NonFatalHandler
from gedcom_spans.encodings.detection import DetectedEncoding
from gedcom_spans.encodings.errors import (
    ExternalEncodingMismatch,
    FileEncodingMismatch,
    InvalidHeader,
    UnknownEncoding,
    VersionEncodingMismatch,
    VersionEncodingMismatchWarning,
)
from gedcom_spans.encodings.types import (
    DeterminedByVersion,
    Encoding,
    GedcomEncoding,
    SpecifiedInHeader,
)
from gedcom_spans.loader.source import GedcomSource
from gedcom_spans.loader.tree_builder import RawRecord
from gedcom_spans.logging import get_logger
from gedcom_spans.spans import MaybeSourced, Sourced, Span

log = get_logger(__name__)

_VERSION_RE = re.compile(r"[0-9]+(\.[0-9]+){0,2}")


@dataclass(frozen=True, order=True)
class FileVersion:
    """A version number as written in ``GEDC.VERS``."""

    major: int
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        if self.patch:
            return f"{self.major}.{self.minor}.{self.patch}"
        return f"{self.major}.{self.minor}"

    def known(self) -> Optional["KnownVersion"]:
        """The supported version this number denotes, if any."""
        if self.major == 7 and self.minor == 0:
            return KnownVersion.V7_0
        return _KNOWN_BY_NUMBER.get((self.major, self.minor, self.patch))


class KnownVersion(Enum):
    """GEDCOM versions this library can read."""

    V5_5 = "5.5"
    V5_5_1 = "5.5.1"
    V5_5_5 = "5.5.5"
    V7_0 = "7.0"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "KnownVersion":
        """Look up a version given on the command line or in configuration."""
        try:
            version = parse_version(name.strip())
        except ValueError:
            version = None
        known = version.known() if version else None
        if known is None:
            expected = ", ".join(v.value for v in cls)
            raise ValueError(f"unsupported GEDCOM version {name!r} (expected one of: {expected})")
        return known


_KNOWN_BY_NUMBER: Dict[Tuple[int, int, int], KnownVersion] = {
    (5, 5, 0): KnownVersion.V5_5,
    (5, 5, 1): KnownVersion.V5_5_1,
    (5, 5, 5): KnownVersion.V5_5_5,
    (7, 0, 0): KnownVersion.V7_0,
}


def parse_version(text: str) -> FileVersion:
    """
    Parse ``M[.m[.p]]`` where every part is a decimal number 0-255.

    Raises:
        ValueError: if ``text`` is not of that form.
    """
    if not text.isascii() or not _VERSION_RE.fullmatch(text):
        raise ValueError(f"invalid GEDCOM version {text!r}")

    parts = [int(part) for part in text.split(".")]
    if any(part > 255 for part in parts):
        raise ValueError(f"invalid GEDCOM version {text!r}")
    return FileVersion(*parts)


# ---------- Encoding rules ----------

class EncodingSupport(Enum):
    PERMITTED = "permitted"
    # permitted only by a later version, which the file is then read as
    PERMITTED_WITH_VERSION = "permitted_with_version"
    NOT_PERMITTED = "not_permitted"


_PERMITTED: Dict[KnownVersion, Tuple[Encoding, ...]] = {
    KnownVersion.V5_5: (Encoding.ANSEL, Encoding.ASCII),
    KnownVersion.V5_5_1: (
        Encoding.ANSEL,
        Encoding.ASCII,
        Encoding.UTF8,
        Encoding.UTF16LE,
        Encoding.UTF16BE,
    ),
    KnownVersion.V5_5_5: (Encoding.UTF8, Encoding.UTF16LE, Encoding.UTF16BE),
    KnownVersion.V7_0: (Encoding.UTF8,),
}


def permitted_encodings(version: KnownVersion) -> Tuple[Encoding, ...]:
    return _PERMITTED[version]


def is_permitted_encoding(version: KnownVersion, encoding: Encoding) -> EncodingSupport:
    if encoding in _PERMITTED[version]:
        return EncodingSupport.PERMITTED
    # 5.5 files in Unicode are common enough to read them as 5.5.1
    if version is KnownVersion.V5_5 and encoding in _PERMITTED[KnownVersion.V5_5_1]:
        return EncodingSupport.PERMITTED_WITH_VERSION
    return EncodingSupport.NOT_PERMITTED


# ---------- Errors ----------

class VersionError(GedcomError):
    """A problem with the version declared in the header."""

    code = "gedcom::version"


class HeaderMalformed(VersionError):
    code = "gedcom::version::header"

    def __init__(self, span: Span) -> None:
        super().__init__(
            "Invalid GEDCOM header",
            span=span,
            label="the version should be given as a plain value",
        )


class InvalidVersion(VersionError):
    code = "gedcom::version::invalid"

    def __init__(self, text: str, span: Span) -> None:
        super().__init__(
            "Unknown version specified in GEDCOM file",
            span=span,
            label="this is an invalid version",
        )
        self.text = text


class UnsupportedVersion(VersionError):
    code = "gedcom::version::unsupported"

    def __init__(self, version: str, span: Span) -> None:
        super().__init__(
            "Unsupported version specified in GEDCOM file",
            span=span,
            label="version specified here",
            help=f"GEDCOM version {version} is not supported by the `gedcom-spans` library",
        )
        self.version = version


class VersionNotFound(VersionError):
    code = "gedcom::version::missing"
    help = "GEDCOM version can be explicitly set using the `--force-version` flag"

    def __init__(self, head: Span) -> None:
        super().__init__(
            "GEDCOM file appeared to be syntactically valid, but no version could be found",
            span=head,
            label="this is the head record, which should contain the GEDCOM version",
        )


# ---------- Reading the header ----------

def version_from_header(head: Sourced[RawRecord]) -> Sourced[KnownVersion]:
    """
    Read ``HEAD.GEDC.VERS`` and map it onto a supported version.

    Raises:
        HeaderMalformed: when VERS has no string value.
        InvalidVersion: when VERS is not a version number.
        UnsupportedVersion: for versions this library cannot read, including
            GEDCOM 2.x/3.0 files (``HEAD.SOUR`` without ``HEAD.GEDC``).
        VersionNotFound: when the header names no version at all.
    """
    gedc = head.value.subrecord_optional("GEDC")
    vers = gedc.value.subrecord_optional("VERS") if gedc else None

    if vers is not None:
        value = vers.value.value
        span = vers.value.value_span
        if not value.is_str:
            raise HeaderMalformed(vers.value.line.span)

        text = value.text or ""
        try:
            version = parse_version(text)
        except ValueError:
            raise InvalidVersion(text, span) from None

        known = version.known()
        if known is None:
            raise UnsupportedVersion(str(version), span)

        log.debug(f"Detected GEDCOM version {known} from file header")
        return Sourced(known, span)

    sour = head.value.subrecord_optional("SOUR")
    if gedc is None and sour is not None:
        # GEDCOM 2.x / 3.0 identify themselves through HEAD.SOUR only
        sour_vers = sour.value.subrecord_optional("VERS")
        label = "3.0" if sour_vers is not None else "2.x"
        raise UnsupportedVersion(label, sour.value.line.span)

    raise VersionNotFound(head.span)


def detect_encoding_from_head_record(
    source: GedcomSource,
    version: MaybeSourced[KnownVersion],
    head: Sourced[RawRecord],
    external: Optional[DetectedEncoding],
    warnings: NonFatalHandler,
) -> Tuple[MaybeSourced[KnownVersion], DetectedEncoding]:
    """
    Decide the encoding of a file from its HEAD record.

    ``version`` has a span when it was read from the file and none when it
    was forced by the caller. The returned version differs from the given
    one when a 5.5 file declares a Unicode encoding and is read as 5.5.1.
    """
    log.debug(f"Detecting encoding from HEAD record for version {version.value}")

    if version.value is KnownVersion.V7_0:
        if external is not None and external.encoding is not Encoding.UTF8:
            raise VersionEncodingMismatch(
                KnownVersion.V7_0,
                (Encoding.UTF8,),
                external.encoding,
                version.span,
                [external.reason],
            )
        return version, DetectedEncoding(
            Encoding.UTF8, DeterminedByVersion(KnownVersion.V7_0, version.span)
        )

    char = head.value.subrecord_optional("CHAR")
    if char is None:
        if external is not None:
            return version, external
        raise InvalidHeader("no CHAR record in HEAD", head.value.line.span)

    char_value = char.value.value
    char_span = char.value.value_span
    if not char_value.is_str:
        raise InvalidHeader("CHAR record has no encoding name", char.value.line.span)

    declared = GedcomEncoding.parse(source.bytes_at(char_span))
    if declared is None:
        raise UnknownEncoding(char_value.text or "", char_span)

    if external is not None:
        if external.encoding not in declared.candidates():
            raise ExternalEncodingMismatch(
                declared,
                external.encoding,
                char_span,
                external.reason,
            )
        encoding = external.encoding
    else:
        resolved = declared.resolve()
        if resolved is None:
            # UNICODE, but the bytes did not look like UTF-16
            raise FileEncodingMismatch(declared, char_span)
        encoding = resolved

    support = is_permitted_encoding(version.value, encoding)
    if support is EncodingSupport.PERMITTED_WITH_VERSION and version.span is not None:
        warnings.report(
            VersionEncodingMismatchWarning(
                version.value, version.span, encoding, char_span, KnownVersion.V5_5_1
            )
        )
        log.debug(f"Updating version to {KnownVersion.V5_5_1} because of encoding {encoding}")
        version = MaybeSourced(KnownVersion.V5_5_1, None)
    elif support is not EncodingSupport.PERMITTED:
        raise VersionEncodingMismatch(
            version.value,
            permitted_encodings(version.value),
            encoding,
            version.span,
            [external.reason] if external is not None else [],
        )

    detected = external if external is not None else DetectedEncoding(
        encoding, SpecifiedInHeader(char_span)
    )
    return version, detected
