# src/gedcom_spans/loader/tree_builder.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

from gedcom_spans.diagnostics.base import GedcomError, NonFatalHandler, Severity
from gedcom_spans.spans import Sourced, Span

from .source import DecodedSource, GedcomSource
from .tokenizer import LineValue, RawLine, iterate_lines

if TYPE_CHECKING:
    from gedcom_spans.encodings.detection import DetectedEncoding
    from gedcom_spans.versions import KnownVersion

# tags that are complete without a value or subrecords
VALUELESS_LEAF_TAGS = frozenset({"CONT", "CONC", "TRLR"})


@dataclass
class RawRecord:
    """
    A GEDCOM record (or sub-record) assembled from its line and children.

    Attributes:
        line: The tokenized line that opens this record.
        records: Direct sub-records, in input order. Each child is wrapped
            in ``Sourced`` with a span covering the child line through its
            last descendant.
    """

    line: Sourced[RawLine]
    records: List[Sourced["RawRecord"]] = field(default_factory=list)

    # ---------- Helper / Mixin Methods ----------

    @property
    def tag(self) -> str:
        return self.line.value.tag.value

    @property
    def xref(self) -> Optional[str]:
        xref = self.line.value.xref
        return xref.value if xref is not None else None

    @property
    def value(self) -> LineValue:
        return self.line.value.value.value

    @property
    def value_span(self) -> Span:
        return self.line.value.value.span

    def subrecord_optional(self, tag: str) -> Optional[Sourced["RawRecord"]]:
        """Return the first direct child with this tag, or None."""
        for child in self.records:
            if child.value.tag == tag:
                return child
        return None

    def find_children(self, tag: str) -> List[Sourced["RawRecord"]]:
        """Return all direct children with a given tag."""
        return [c for c in self.records if c.value.tag == tag]

    def iter_subtree(self) -> Iterator["RawRecord"]:
        """Yield this record and all descendants in depth-first order."""
        yield self
        for child in self.records:
            yield from child.value.iter_subtree()

    def __repr__(self) -> str:
        xref = f" {self.xref}" if self.xref else ""
        return f"<RawRecord{xref} {self.tag}: {str(self.value)!r} children={len(self.records)}>"


# ---------- Errors ----------

class RecordStructureError(GedcomError):
    """Raised when line levels do not describe a valid record tree."""

    code = "gedcom::record_error"


class InvalidChildLevel(RecordStructureError):
    code = "gedcom::record_error::invalid_child_level"

    def __init__(self, level: int, expected_level: int, span: Span) -> None:
        super().__init__(
            f"Invalid child level {level}, expected {expected_level} or less",
            span=span,
            label=f"this should be less than or equal to {expected_level}",
        )
        self.level = level
        self.expected_level = expected_level


class MissingRecordValue(RecordStructureError):
    code = "gedcom::record_error::value_missing"
    severity = Severity.WARNING

    def __init__(self, span: Span) -> None:
        super().__init__(
            "A record without subrecords should have a value",
            span=span,
            label="this record should contain a value, since it has no subrecords",
        )


# ---------- Builder ----------

class RecordBuilder:
    """
    Push-driven assembly of records from ``(level, line)`` pairs.

    ``stack[i]`` is the open record at level ``i``. Records are closed when
    a line at the same or a shallower level arrives; a closed level-0
    record is returned to the caller.
    """

    def __init__(self) -> None:
        self._stack: List[RawRecord] = []

    def _pop_to_level(
        self, level: int, warnings: NonFatalHandler
    ) -> Optional[Sourced[RawRecord]]:
        while len(self._stack) > level:
            child = self._stack.pop()

            if (
                not child.records
                and child.value.is_none
                and child.tag not in VALUELESS_LEAF_TAGS
            ):
                warnings.report(MissingRecordValue(child.line.span))

            if child.records:
                span = Span.from_indices(child.line.span.start, child.records[-1].span.end)
            else:
                span = child.line.span

            sourced = Sourced(child, span)
            if not self._stack:
                return sourced
            self._stack[-1].records.append(sourced)

        return None

    def handle_line(
        self,
        level: Sourced[int],
        line: Sourced[RawLine],
        warnings: NonFatalHandler,
    ) -> Optional[Sourced[RawRecord]]:
        to_emit = self._pop_to_level(level.value, warnings)

        expected_level = len(self._stack)
        if level.value != expected_level:
            raise InvalidChildLevel(level.value, expected_level, level.span)

        self._stack.append(RawRecord(line=line))
        return to_emit

    def complete(self, warnings: NonFatalHandler) -> Optional[Sourced[RawRecord]]:
        return self._pop_to_level(0, warnings)


def iter_records(
    source: GedcomSource, warnings: NonFatalHandler
) -> Iterator[Sourced[RawRecord]]:
    """Yield each top-level record of ``source`` as soon as it is complete."""
    builder = RecordBuilder()
    for level, line in iterate_lines(source):
        record = builder.handle_line(level, line, warnings)
        if record is not None:
            yield record

    record = builder.complete(warnings)
    if record is not None:
        yield record


def build_records(source: GedcomSource, warnings: NonFatalHandler) -> List[Sourced[RawRecord]]:
    return list(iter_records(source, warnings))


# ---------- Tree ----------

@dataclass
class RecordTree:
    """
    Top-level records of a decoded file, kept together with the buffer
    their spans refer to.

    Attributes:
        records: Level-0 records (HEAD, INDI, FAM, ..., TRLR) in file order.
        source: The decoded text every span points into.
        version: The GEDCOM version the file was read as, when known.
        encoding: The encoding the file was decoded with, when known.
    """

    records: List[Sourced[RawRecord]]
    source: DecodedSource
    version: Optional["KnownVersion"] = None
    encoding: Optional["DetectedEncoding"] = None

    # Internal indexes, built lazily
    _pointer_index: Dict[str, Sourced[RawRecord]] = field(
        default_factory=dict, init=False, repr=False
    )
    _tag_index: Dict[str, List[Sourced[RawRecord]]] = field(
        default_factory=dict, init=False, repr=False
    )
    _indexes_built: bool = field(default=False, init=False, repr=False)

    # ------------------------------------------------------------------ #
    # Core helpers
    # ------------------------------------------------------------------ #

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Sourced[RawRecord]]:
        return iter(self.records)

    def iter_nodes(self) -> Iterator[RawRecord]:
        """Iterate over every record in the tree (depth-first)."""
        for root in self.records:
            yield from root.value.iter_subtree()

    def text(self, span: Span) -> str:
        return self.source.text(span)

    # ------------------------------------------------------------------ #
    # Index construction
    # ------------------------------------------------------------------ #

    def _build_indexes(self) -> None:
        pointer_index: Dict[str, Sourced[RawRecord]] = {}
        tag_index: Dict[str, List[Sourced[RawRecord]]] = {}

        for record in self.records:
            xref = record.value.xref
            if xref:
                pointer_index.setdefault(xref, record)
            tag_index.setdefault(record.value.tag, []).append(record)

        self._pointer_index = pointer_index
        self._tag_index = tag_index
        self._indexes_built = True

    def _ensure_indexes(self) -> None:
        if not self._indexes_built:
            self._build_indexes()

    # ------------------------------------------------------------------ #
    # Public query API
    # ------------------------------------------------------------------ #

    def find_by_pointer(self, pointer: str) -> Optional[Sourced[RawRecord]]:
        """
        Return the top-level record carrying the given xref, if any.

        Args:
            pointer: e.g. '@I1@', '@F5@'.
        """
        if not pointer:
            return None
        self._ensure_indexes()
        return self._pointer_index.get(pointer)

    def find_records_by_tag(self, tag: str) -> List[Sourced[RawRecord]]:
        """Return all level-0 records with the given tag."""
        if not tag:
            return []
        self._ensure_indexes()
        return list(self._tag_index.get(tag, []))

    def all_tags(self) -> List[str]:
        """Return the distinct tags found among level-0 records."""
        return sorted({rec.value.tag for rec in self.records})

    def __repr__(self) -> str:
        return f"<RecordTree records={len(self.records)} version={self.version}>"
