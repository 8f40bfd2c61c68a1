# src/gedcom_spans/encodings/errors.py

"""Errors raised while determining the encoding of a file or decoding it."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from gedcom_spans.diagnostics.base import Advice, Diagnostic, GedcomError, Severity
from gedcom_spans.spans import Span

from .types import Encoding, EncodingReason, GedcomEncoding

if TYPE_CHECKING:
    from gedcom_spans.versions import KnownVersion

FORCE_ENCODING_HELP = "encoding can be chosen explicitly using the `--force-encoding` option"


class EncodingError(GedcomError):
    """A problem found while trying to determine the encoding of a file."""

    code = "gedcom::encoding"


class InvalidHeader(EncodingError):
    code = "gedcom::encoding::invalid_header"

    def __init__(self, detail: str, span: Optional[Span] = None) -> None:
        super().__init__(f"Invalid HEAD record: {detail}", span=span, label=detail)
        self.detail = detail


class NotGedcomFile(EncodingError):
    code = "gedcom::encoding::not_gedcom"
    help = "GEDCOM files must start with a '0 HEAD' record, but this was not found"

    def __init__(self, span: Span) -> None:
        super().__init__(
            "Input file does not appear to be valid GEDCOM",
            span=span,
            label="first line of file",
        )


class MultiVolumeFragment(EncodingError):
    code = "gedcom::encoding::multi_volume"
    help = "GEDCOM files must start with a '0 HEAD' record, but this was not found"

    def __init__(self, span: Span) -> None:
        super().__init__(
            "Input file appears to be the trailing part of a multi-volume GEDCOM file",
            span=span,
            label="this record is valid but not the start of a GEDCOM file",
        )


class InvalidBOM(EncodingError):
    code = "gedcom::encoding::invalid_bom"
    help = "UTF-32 is not permitted as an encoding by any GEDCOM specification"

    def __init__(self, encoding_name: str) -> None:
        super().__init__(
            f"The byte-order mark (BOM) detected is for an unsupported encoding {encoding_name}",
            span=Span(0, 4),
            label="byte-order mark",
        )
        self.encoding_name = encoding_name


class UnknownEncoding(EncodingError):
    code = "gedcom::encoding::invalid_encoding"

    def __init__(self, name: str, span: Span) -> None:
        super().__init__(
            "An unknown encoding was specified in the GEDCOM file",
            span=span,
            label="this is not a supported encoding",
            help=f"supported values are: {', '.join(e.value for e in GedcomEncoding)}",
        )
        self.name = name


class ExternalEncodingMismatch(EncodingError):
    code = "gedcom::encoding::external_encoding_mismatch"

    def __init__(
        self,
        declared: GedcomEncoding,
        detected: Encoding,
        span: Span,
        reason: EncodingReason,
    ) -> None:
        super().__init__(
            f"The file's GEDCOM header specifies the encoding to be {declared}, "
            f"but the file encoding was determined to be {detected}",
            span=span,
            label="encoding was specified here",
            related=[reason],
        )
        self.declared = declared
        self.detected = detected
        self.reason = reason


class FileEncodingMismatch(EncodingError):
    code = "gedcom::encoding::file_encoding_mismatch"

    def __init__(self, declared: GedcomEncoding, span: Span) -> None:
        super().__init__(
            f"The file's GEDCOM header specifies the encoding to be {declared}, "
            "but the file is in an unknown ASCII-compatible encoding",
            span=span,
            label="encoding was specified here",
        )
        self.declared = declared


class VersionEncodingMismatch(EncodingError):
    code = "gedcom::encoding::version_encoding_mismatch"

    def __init__(
        self,
        version: "KnownVersion",
        required: Sequence[Encoding],
        detected: Encoding,
        version_span: Optional[Span],
        reasons: Sequence[EncodingReason] = (),
    ) -> None:
        forced = ""
        if version_span is None:
            forced = " (this version was selected explicitly in the options)"
        required_names = " or ".join(str(e) for e in required)
        super().__init__(
            f"GEDCOM version {version}{forced} requires the encoding to be {required_names}, "
            f"but the file encoding was determined to be {detected}",
            span=version_span,
            label="file version was specified here",
            related=reasons,
        )
        self.version = version
        self.required = tuple(required)
        self.detected = detected
        self.version_span = version_span


class VersionEncodingMismatchWarning(EncodingError):
    code = "gedcom::encoding::version_encoding_upgrade"
    severity = Severity.WARNING

    def __init__(
        self,
        version: "KnownVersion",
        version_span: Span,
        encoding: Encoding,
        encoding_span: Span,
        assumed_version: "KnownVersion",
    ) -> None:
        super().__init__(
            f"GEDCOM version {version} does not permit the encoding {encoding}; "
            f"the file will be read as GEDCOM {assumed_version}",
            span=version_span,
            label="file version was specified here",
        )
        self.version = version
        self.version_span = version_span
        self.encoding = encoding
        self.encoding_span = encoding_span
        self.assumed_version = assumed_version

    def labels(self) -> List[Tuple[Span, str]]:
        return [
            (self.version_span, "file version was specified here"),
            (self.encoding_span, "encoding was specified here"),
        ]


# ---------- Decoding ----------

class PossibleEncodings(Advice):
    """Other encodings in which the offending bytes decode cleanly."""

    def __init__(self, candidates: Sequence[Tuple[Encoding, str]]) -> None:
        plural = "s" if len(candidates) > 1 else ""
        article = "an" if len(candidates) == 1 else ""
        lines = "".join(f"\n→ {text} (using {encoding})" for encoding, text in candidates)
        super().__init__(
            f"the invalid data appears to be valid in {article}{' ' if article else ''}"
            f"other encoding{plural}:{lines}",
            code="gedcom::possible_encodings",
            help=FORCE_ENCODING_HELP,
        )
        self.candidates = list(candidates)


class InvalidDataForEncoding(GedcomError):
    """Raised when the bytes of a file are not valid in the chosen encoding."""

    code = "gedcom::encoding::invalid_data"

    def __init__(
        self,
        encoding: Encoding,
        span: Optional[Span],
        reasons: Sequence[Diagnostic],
        detail: Optional[str] = None,
    ) -> None:
        message = f"Invalid data for encoding {encoding}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(
            message,
            span=span,
            label=f"this is not valid data for the encoding {encoding}",
            related=reasons,
        )
        self.encoding = encoding
        self.detail = detail

    @property
    def suggestions(self) -> List[Tuple[Encoding, str]]:
        for diag in self.related():
            if isinstance(diag, PossibleEncodings):
                return diag.candidates
        return []


class DecodingError(EncodingError):
    """
    Wraps a syntax or structure error found while reading the header of a
    file whose encoding is not settled yet. ``source`` holds the buffer the
    inner spans point into.
    """

    code = "gedcom::decoding"

    def __init__(self, inner: GedcomError) -> None:
        super().__init__(
            "A problem was found while trying to determine the encoding of the GEDCOM file: "
            f"{inner.message()}",
            related=inner.related(),
            help=inner.help,
        )
        self.inner = inner
        self.code = inner.code
        self.severity = inner.severity

    def labels(self) -> List[Tuple[Span, str]]:
        return self.inner.labels()
