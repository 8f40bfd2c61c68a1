# src/gedcom_spans/reader/structure.py

from __future__ import annotations

from typing import Optional

from gedcom_spans.diagnostics.base import GedcomError, NonFatalHandler, Severity
from gedcom_spans.loader.tree_builder import RawRecord
from gedcom_spans.spans import Sourced, Span


# ---------- Errors ----------

class FileStructureError(GedcomError):
    """The sequence of top-level records does not form a GEDCOM file."""

    code = "gedcom::schema_error"


class MissingHeadRecord(FileStructureError):
    code = "gedcom::schema_error::missing_head_record"

    def __init__(self, span: Optional[Span] = None) -> None:
        super().__init__(
            "Missing HEAD record",
            span=span,
            label="first record in file should be a HEAD record",
        )


class MissingTrailerRecord(FileStructureError):
    code = "gedcom::schema_error::missing_trailer_record"
    severity = Severity.WARNING

    def __init__(self, span: Optional[Span] = None) -> None:
        super().__init__(
            "Missing TRLR record",
            span=span,
            label="last record in file should be a TRLR record",
        )


class RecordsAfterTrailer(FileStructureError):
    code = "gedcom::schema_error::records_after_trailer"
    severity = Severity.WARNING

    def __init__(self, span: Span) -> None:
        super().__init__(
            "Records after TRLR record",
            span=span,
            label="this record appears after the TRLR record",
        )


# ---------- Checks ----------

class FileStructure:
    """
    Watches the top-level records of a file go by and reports a missing
    HEAD, records following TRLR, and a missing TRLR.
    """

    def __init__(self) -> None:
        self.record_count = 0
        self._trailer_seen = False
        self._after_trailer_reported = False
        self._last_span: Optional[Span] = None

    def check(self, record: Sourced[RawRecord], handler: NonFatalHandler) -> None:
        if self.record_count == 0 and record.value.tag != "HEAD":
            handler.report(MissingHeadRecord(record.value.line.span))

        if self._trailer_seen and not self._after_trailer_reported:
            handler.report(RecordsAfterTrailer(record.span))
            self._after_trailer_reported = True

        if record.value.tag == "TRLR":
            self._trailer_seen = True

        self.record_count += 1
        self._last_span = record.span

    def complete(self, handler: NonFatalHandler) -> None:
        if self.record_count == 0:
            handler.report(MissingHeadRecord())
        elif not self._trailer_seen:
            span = Span(self._last_span.end, 0) if self._last_span else None
            handler.report(MissingTrailerRecord(span))
