# tests/test_tree_builder.py

from __future__ import annotations

import pytest

from gedcom_spans.loader import (
    DecodedSource,
    InvalidChildLevel,
    InvalidTagCharacter,
    MissingRecordValue,
    RecordTree,
    build_records,
    iter_records,
)
from gedcom_spans.reader import RawMode, ValidationMode
from gedcom_spans.spans import Span

SAMPLE = (
    "0 HEAD\n"
    "1 GEDC\n"
    "2 VERS 5.5.1\n"
    "0 @I1@ INDI\n"
    "1 NAME John /Smith/\n"
    "1 BIRT\n"
    "2 DATE 1 JAN 1900\n"
    "0 TRLR\n"
)


def _records(text: str, handler=None):
    source = DecodedSource.from_str(text)
    return source, build_records(source, handler or RawMode())


def test_build_records_returns_top_level_records() -> None:
    _, records = _records(SAMPLE)
    assert [r.value.tag for r in records] == ["HEAD", "INDI", "TRLR"]


def test_record_span_covers_line_through_last_descendant() -> None:
    source, records = _records(SAMPLE)
    indi = records[1]
    assert source.text(indi.span) == (
        "0 @I1@ INDI\n1 NAME John /Smith/\n1 BIRT\n2 DATE 1 JAN 1900"
    )

    birt = indi.value.subrecord_optional("BIRT")
    assert source.text(birt.span) == "1 BIRT\n2 DATE 1 JAN 1900"

    trlr = records[2]
    assert source.text(trlr.span) == "0 TRLR"


def test_record_helpers() -> None:
    _, records = _records(SAMPLE)
    indi = records[1].value
    assert indi.xref == "@I1@"
    assert indi.subrecord_optional("NAME").value.value.text == "John /Smith/"
    assert indi.subrecord_optional("DEAT") is None
    assert [c.value.tag for c in indi.find_children("BIRT")] == ["BIRT"]
    assert [r.tag for r in indi.iter_subtree()] == ["INDI", "NAME", "BIRT", "DATE"]


def test_records_are_yielded_as_soon_as_complete() -> None:
    source = DecodedSource.from_str("0 HEAD\n1 GEDC\n2 VERS 7.0\n0 TRLR\n1 ?BAD\n")
    records = iter_records(source, RawMode())

    head = next(records)
    assert head.value.tag == "HEAD"
    # the broken line only surfaces once the reader gets that far
    with pytest.raises(InvalidTagCharacter):
        next(records)


def test_invalid_child_level() -> None:
    with pytest.raises(InvalidChildLevel) as info:
        _records("0 HEAD\n2 TAG\n")
    err = info.value
    assert err.level == 2
    assert err.expected_level == 1
    assert err.span == Span(7, 1)
    assert err.message() == "Invalid child level 2, expected 1 or less"


def test_first_line_must_be_level_zero() -> None:
    with pytest.raises(InvalidChildLevel) as info:
        _records("1 HEAD\n")
    assert info.value.expected_level == 0


def test_missing_record_value_warning() -> None:
    handler = ValidationMode()
    _, records = _records("0 HEAD\n1 GEDC\n0 TRLR\n", handler)

    assert len(records) == 2
    assert len(handler.diagnostics) == 1
    warning = handler.diagnostics[0]
    assert isinstance(warning, MissingRecordValue)
    assert warning.span == Span(7, 6)


def test_valueless_leaf_tags_do_not_warn() -> None:
    handler = ValidationMode()
    _records("0 HEAD\n1 NOTE a\n2 CONT\n2 CONC\n0 TRLR\n", handler)
    assert handler.diagnostics == []


def test_record_tree_indexes() -> None:
    source, records = _records(SAMPLE)
    tree = RecordTree(records=records, source=source)

    assert len(tree) == 3
    assert tree.find_by_pointer("@I1@") is records[1]
    assert tree.find_by_pointer("@X9@") is None
    assert tree.find_by_pointer("") is None
    assert [r.value.tag for r in tree.find_records_by_tag("HEAD")] == ["HEAD"]
    assert tree.find_records_by_tag("") == []
    assert tree.all_tags() == ["HEAD", "INDI", "TRLR"]
    assert [n.tag for n in tree.iter_nodes()][:3] == ["HEAD", "GEDC", "VERS"]


def test_spans_cover_descendants_and_levels_nest() -> None:
    source, records = _records(SAMPLE)

    def check(record, level: int) -> None:
        raw = record.value
        assert raw.line.span.start == record.span.start
        assert 0 <= record.span.start <= record.span.end <= len(source)
        assert source.bytes_at(raw.line.span).startswith(str(level).encode("ascii"))
        for child in raw.records:
            assert record.span.contains(child.span)
            check(child, level + 1)

    for record in records:
        check(record, 0)
