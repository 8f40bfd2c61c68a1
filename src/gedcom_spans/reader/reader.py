# src/gedcom_spans/reader/reader.py

"""
Reader: bytes in, decoded text and record trees out.

Decoding bootstraps the encoding in up to three steps:

1. look at the first bytes for a byte-order mark or UTF-16 shape
   (``detect_external_encoding``),
2. read the HEAD record (from the raw bytes when step 1 was inconclusive)
   to find the version and the declared encoding,
3. check the combination against the rules of that version and decode.

The decoded text is then tokenized and assembled into records lazily, and
each read mode decides what happens to non-fatal diagnostics.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from gedcom_spans.diagnostics.base import Diagnostic, GedcomError, NonFatalHandler, Severity
from gedcom_spans.encodings.detection import DetectedEncoding, detect_external_encoding
from gedcom_spans.encodings.errors import DecodingError
from gedcom_spans.encodings.types import Forced
from gedcom_spans.loader.file_loader import GedcomFile
from gedcom_spans.loader.source import BufferLike, DecodedSource, GedcomSource, RawSource
from gedcom_spans.loader.tokenizer import LineSyntaxError, iterate_lines
from gedcom_spans.loader.tree_builder import (
    RawRecord,
    RecordBuilder,
    RecordStructureError,
    RecordTree,
    iter_records,
)
from gedcom_spans.logging import get_logger
from gedcom_spans.spans import MaybeSourced, Sourced
from gedcom_spans.versions import (
    KnownVersion,
    detect_encoding_from_head_record,
    version_from_header,
)

from .modes import ParseMode, RawMode, ValidationMode, Validity
from .options import ParseOptions
from .structure import FileStructure, MissingHeadRecord

log = get_logger(__name__)


# ---------- Results ----------

@dataclass
class DecodedInput:
    """
    A decoded file, ready to be read into records.

    Attributes:
        source: The decoded text (UTF-8 bytes).
        version: The version the file is read as.
        detected_encoding: The encoding and the reason it was chosen.
        warnings: Non-fatal diagnostics found while decoding.
        borrowed: True when ``source`` shares the input buffer.
        file: The mapped file ``source`` borrows from, if any.
    """

    source: DecodedSource
    version: KnownVersion
    detected_encoding: DetectedEncoding
    warnings: List[Diagnostic] = field(default_factory=list)
    borrowed: bool = False
    file: Optional[GedcomFile] = None

    def close(self) -> None:
        if self.file is not None:
            self.file.close()

    def __enter__(self) -> "DecodedInput":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


@dataclass
class ValidationResult(Diagnostic):
    """Outcome of ``Reader.validate``; itself reportable as advice."""

    validity: Validity
    record_count: int
    error_count: int
    warning_count: int
    advice_count: int
    diagnostics: List[Diagnostic] = field(default_factory=list)

    code = "gedcom::validation_result"
    severity = Severity.ADVICE

    @property
    def is_valid(self) -> bool:
        return self.validity is not Validity.INVALID

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    def message(self) -> str:
        return (
            f"Validation was {self.validity.value}: {self.record_count} top-level records "
            f"processed with {_plural(self.error_count, 'error', 'errors')}, "
            f"{_plural(self.warning_count, 'warning', 'warnings')}, and "
            f"{_plural(self.advice_count, 'piece of advice', 'pieces of advice')}."
        )

    def related(self) -> List[Diagnostic]:
        return list(self.diagnostics)

    def __str__(self) -> str:
        return self.message()


# ---------- Header helpers ----------

@contextmanager
def _reading_header(source: GedcomSource) -> Iterator[None]:
    """Attach ``source`` to errors raised while inspecting the header."""
    try:
        yield
    except (LineSyntaxError, RecordStructureError) as exc:
        exc.source = source
        wrapped = DecodingError(exc)
        wrapped.source = source
        raise wrapped from exc
    except GedcomError as exc:
        if exc.source is None:
            exc.source = source
        raise


def read_head_record(source: GedcomSource) -> Sourced[RawRecord]:
    """
    Read only the first top-level record of ``source``, which must be HEAD.

    Warnings are dropped here; the full read reports them again.

    Raises:
        MissingHeadRecord: if the first record is not HEAD, or there is none.
        LineSyntaxError / RecordStructureError: for malformed lines.
    """
    builder = RecordBuilder()
    warnings = RawMode()
    first: Optional[Sourced[RawRecord]] = None

    for level, line in iterate_lines(source):
        first = builder.handle_line(level, line, warnings)
        if first is not None:
            break
    else:
        first = builder.complete(warnings)

    if first is None:
        raise MissingHeadRecord()
    if first.value.tag != "HEAD":
        raise MissingHeadRecord(first.value.line.span)
    return first


# ---------- Reader ----------

class Reader:
    """
    Entry point for reading GEDCOM data.

    >>> reader = Reader()
    >>> decoded = reader.decode(b"0 HEAD\\n1 GEDC\\n2 VERS 7.0\\n0 TRLR\\n")
    >>> tree = reader.parse(decoded)
    """

    def __init__(self, options: Optional[ParseOptions] = None) -> None:
        self.options = options or ParseOptions()

    # ------------------------------------------------------------------ #
    # Decoding
    # ------------------------------------------------------------------ #

    def decode(self, data: BufferLike) -> DecodedInput:
        """
        Determine the encoding and version of ``data`` and decode it.

        Raises:
            EncodingError: when the encoding cannot be determined or does
                not agree with the header or the version.
            VersionError: when the version cannot be determined.
            InvalidDataForEncoding: when the bytes are invalid in the encoding.
            MissingHeadRecord: when the file does not start with HEAD.
        """
        warnings = ValidationMode()
        opts = self.options

        if opts.force_encoding is not None:
            detected = DetectedEncoding(opts.force_encoding, Forced())
            source, borrowed = detected.decode(data)
            version = self._version_of(source, opts.force_version)

        else:
            external = detect_external_encoding(data)

            if external is not None:
                log.debug(f"Encoding {external.encoding} detected externally: {external.reason}")
                source, borrowed = external.decode(data)
                with _reading_header(source):
                    head = read_head_record(source)
                    declared = self._declared_version(head, opts.force_version)
                    checked, _ = detect_encoding_from_head_record(
                        source, declared, head, external, warnings
                    )
                detected = external
                version = checked.value

            else:
                raw = RawSource(data)
                with _reading_header(raw):
                    head = read_head_record(raw)
                    declared = self._declared_version(head, opts.force_version)
                    checked, detected = detect_encoding_from_head_record(
                        raw, declared, head, None, warnings
                    )
                source, borrowed = detected.decode(data)
                version = checked.value

        log.debug(
            f"Decoded input as {detected.encoding} ({'borrowed' if borrowed else 'owned'}), "
            f"GEDCOM version {version}"
        )
        return DecodedInput(
            source=source,
            version=version,
            detected_encoding=detected,
            warnings=list(warnings.diagnostics),
            borrowed=borrowed,
        )

    def decode_file(self, path: Union[str, Path]) -> DecodedInput:
        """Memory-map ``path`` and decode it; close the result when done."""
        gedcom_file = GedcomFile.load(path)
        try:
            decoded = self.decode(gedcom_file.data)
        except BaseException:
            gedcom_file.close()
            raise

        if decoded.borrowed:
            decoded.file = gedcom_file
        else:
            gedcom_file.close()
        return decoded

    @staticmethod
    def _declared_version(
        head: Sourced[RawRecord], forced: Optional[KnownVersion]
    ) -> MaybeSourced[KnownVersion]:
        if forced is not None:
            return MaybeSourced(forced, None)
        version = version_from_header(head)
        return MaybeSourced(version.value, version.span)

    @staticmethod
    def _version_of(source: DecodedSource, forced: Optional[KnownVersion]) -> KnownVersion:
        if forced is not None:
            return forced
        with _reading_header(source):
            return version_from_header(read_head_record(source)).value

    # ------------------------------------------------------------------ #
    # Reading records
    # ------------------------------------------------------------------ #

    def _read(
        self,
        decoded: DecodedInput,
        handler: NonFatalHandler,
        *,
        collect_fatal: bool = False,
    ) -> Tuple[List[Sourced[RawRecord]], int]:
        structure = FileStructure()
        records: List[Sourced[RawRecord]] = []

        for warning in decoded.warnings:
            handler.report(warning)

        try:
            for record in iter_records(decoded.source, handler):
                structure.check(record, handler)
                records.append(record)
        except (LineSyntaxError, RecordStructureError) as exc:
            if not collect_fatal:
                raise
            log.debug(f"Stopped reading at fatal error [{exc.code}]")
            handler.report(exc)
            return records, structure.record_count

        structure.complete(handler)
        return records, structure.record_count

    def _tree(self, decoded: DecodedInput, records: List[Sourced[RawRecord]]) -> RecordTree:
        return RecordTree(
            records=records,
            source=decoded.source,
            version=decoded.version,
            encoding=decoded.detected_encoding,
        )

    def raw_records(self, decoded: DecodedInput) -> RecordTree:
        """Read all records, ignoring warnings; malformed lines still raise."""
        records, _ = self._read(decoded, RawMode())
        return self._tree(decoded, records)

    def validate(self, decoded: DecodedInput) -> ValidationResult:
        """Read all records and collect every diagnostic instead of raising."""
        mode = ValidationMode()
        _, record_count = self._read(decoded, mode, collect_fatal=True)

        if mode.error_count:
            validity = Validity.INVALID
        elif mode.warning_count:
            validity = Validity.VALID_WITH_WARNINGS
        else:
            validity = Validity.VALID

        result = ValidationResult(
            validity=validity,
            record_count=record_count,
            error_count=mode.error_count,
            warning_count=mode.warning_count,
            advice_count=mode.advice_count,
            diagnostics=list(mode.diagnostics),
        )
        log.debug(result.message())
        return result

    def parse(self, decoded: DecodedInput) -> RecordTree:
        """Read all records strictly: the first error or warning is raised."""
        records, _ = self._read(decoded, ParseMode())
        return self._tree(decoded, records)


# ---------- Conveniences ----------

def decode_bytes(data: BufferLike, options: Optional[ParseOptions] = None) -> DecodedInput:
    return Reader(options).decode(data)


def read_records(data: BufferLike, options: Optional[ParseOptions] = None) -> RecordTree:
    """Decode ``data`` and return its records, ignoring warnings."""
    reader = Reader(options)
    return reader.raw_records(reader.decode(data))


def validate_bytes(data: BufferLike, options: Optional[ParseOptions] = None) -> ValidationResult:
    """
    Decode and validate ``data``. Errors found while decoding are raised,
    since nothing can be read without an encoding.
    """
    reader = Reader(options)
    return reader.validate(reader.decode(data))
