# src/gedcom_spans/loader/__init__.py

"""
Public interface for the loading stack: sources, line tokenizer and
record tree builder.

Intended usage from other parts of the project and tests:

    from gedcom_spans.loader import (
        DecodedSource,
        RawSource,
        iterate_lines,
        build_records,
        fold_continuations,
    )
"""

from __future__ import annotations

from .file_loader import GedcomFile
from .source import BufferLike, DecodedSource, GedcomSource, RawSource
from .tokenizer import (
    IncompletePointer,
    InvalidLevel,
    InvalidTagCharacter,
    LineSyntaxError,
    LineValue,
    NoSpace,
    NoTag,
    RawLine,
    InvalidXRef,
    ReservedXRef,
    ValueKind,
    iterate_lines,
    parse_line,
)
from .tree_builder import (
    InvalidChildLevel,
    MissingRecordValue,
    RawRecord,
    RecordBuilder,
    RecordStructureError,
    RecordTree,
    build_records,
    iter_records,
)
from .value_reconstructor import fold_continuations

__all__ = [
    "BufferLike",
    "DecodedSource",
    "GedcomFile",
    "GedcomSource",
    "IncompletePointer",
    "InvalidChildLevel",
    "InvalidLevel",
    "InvalidTagCharacter",
    "LineSyntaxError",
    "LineValue",
    "MissingRecordValue",
    "NoSpace",
    "NoTag",
    "RawLine",
    "RawRecord",
    "RawSource",
    "RecordBuilder",
    "RecordStructureError",
    "RecordTree",
    "InvalidXRef",
    "ReservedXRef",
    "ValueKind",
    "build_records",
    "fold_continuations",
    "iter_records",
    "iterate_lines",
    "parse_line",
]
