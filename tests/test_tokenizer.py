# tests/test_tokenizer.py

from __future__ import annotations

import pytest

from gedcom_spans.loader import (
    DecodedSource,
    IncompletePointer,
    InvalidLevel,
    InvalidTagCharacter,
    InvalidXRef,
    NoSpace,
    NoTag,
    RawSource,
    ReservedXRef,
    iterate_lines,
    parse_line,
)
from gedcom_spans.spans import Span


def _parse(text: str):
    source = DecodedSource.from_str(text)
    level, line = parse_line(source, source.full_span())
    return source, level, line.value


def test_parse_line_simple_head() -> None:
    source, level, line = _parse("0 HEAD")
    assert level.value == 0
    assert level.span == Span(0, 1)
    assert line.tag.value == "HEAD"
    assert line.tag.span == Span(2, 4)
    assert line.xref is None
    assert line.value.value.is_none
    # a missing value is a zero-length span at the end of the tag
    assert line.value.span == Span(6, 0)


def test_parse_line_with_xref_and_tag_only() -> None:
    _, level, line = _parse("0 @I1@ INDI")
    assert level.value == 0
    assert line.xref.value == "@I1@"
    assert line.xref.span == Span(2, 4)
    assert line.tag.value == "INDI"
    assert line.tag.span == Span(7, 4)


def test_parse_line_with_value() -> None:
    source, level, line = _parse("1 NOTE This is a test note")
    assert level.value == 1
    assert line.value.value.is_str
    assert line.value.value.text == "This is a test note"
    assert source.text(line.value.span) == "This is a test note"


def test_parse_line_pointer_value() -> None:
    _, _, line = _parse("1 FAMS @F1@")
    value = line.value.value
    assert value.is_ptr
    assert value.text == "@F1@"
    assert line.value.span == Span(7, 4)


def test_parse_line_void_pointer() -> None:
    _, _, line = _parse("1 HUSB @VOID@")
    assert line.value.value.is_void
    assert str(line.value.value) == "@VOID@"


def test_parse_line_escaped_at_sign() -> None:
    _, _, line = _parse("1 NOTE @@home")
    assert line.value.value.text == "@home"
    # the span covers the doubled '@'
    assert line.value.span == Span(7, 6)


def test_parse_line_date_escape_is_text() -> None:
    _, _, line = _parse("2 DATE @#DJULIAN@ 1 JAN 1700")
    assert line.value.value.is_str
    assert line.value.value.text == "@#DJULIAN@ 1 JAN 1700"


def test_parse_line_extension_tag() -> None:
    _, _, line = _parse("1 _MILT Served in the navy")
    assert line.tag.value == "_MILT"


def test_parse_line_keeps_multibyte_value_spans() -> None:
    source, _, line = _parse("1 NAME Ĳsbrand /Ĳssel/")
    assert line.value.value.text == "Ĳsbrand /Ĳssel/"
    assert source.text(line.value.span) == "Ĳsbrand /Ĳssel/"


def test_invalid_level_raises() -> None:
    with pytest.raises(InvalidLevel) as info:
        _parse("X HEAD")
    assert info.value.span == Span(0, 1)
    assert info.value.code == "gedcom::parse_error::invalid_level"


def test_leading_zero_level_is_invalid() -> None:
    with pytest.raises(InvalidLevel):
        _parse("01 NAME x")


def test_line_without_space_has_no_tag() -> None:
    with pytest.raises(NoTag):
        _parse("0HEAD")


def test_line_with_empty_tag_raises() -> None:
    with pytest.raises(NoTag):
        _parse("0 ")


def test_unterminated_xref_raises() -> None:
    with pytest.raises(NoSpace):
        _parse("0 @I1 INDI")


def test_void_xref_is_reserved() -> None:
    with pytest.raises(ReservedXRef) as info:
        _parse("0 @VOID@ INDI")
    assert info.value.span == Span(2, 6)


def test_empty_xref_is_rejected() -> None:
    with pytest.raises(InvalidXRef) as info:
        _parse("0 @@ FAM")
    assert info.value.span == Span(2, 2)


def test_xref_must_be_followed_by_space() -> None:
    with pytest.raises(InvalidXRef) as info:
        _parse("0 @I1@INDI")
    assert info.value.span == Span(2, 4)

    with pytest.raises(NoTag):
        _parse("0 @I1@")


def test_invalid_tag_character_points_at_character() -> None:
    with pytest.raises(InvalidTagCharacter) as info:
        _parse("1 NA-ME x")
    assert info.value.span == Span(4, 1)

    with pytest.raises(InvalidTagCharacter) as info:
        _parse("1 name x")
    assert info.value.span == Span(2, 1)


def test_lone_underscore_tag_is_invalid() -> None:
    with pytest.raises(InvalidTagCharacter):
        _parse("1 _ x")


def test_incomplete_pointer_raises() -> None:
    with pytest.raises(IncompletePointer) as info:
        _parse("1 FAMS @F1")
    assert info.value.span == Span(7, 3)


def test_iterate_lines_over_raw_bytes() -> None:
    source = RawSource(b"0 HEAD\r\n1 CHAR ANSEL\r\n0 TRLR\r\n")
    levels = [(level.value, line.value.tag.value) for level, line in iterate_lines(source)]
    assert levels == [(0, "HEAD"), (1, "CHAR"), (0, "TRLR")]


def test_iterate_lines_raises_when_bad_line_is_reached() -> None:
    source = DecodedSource.from_str("0 HEAD\n1 ?BAD\n")
    lines = iterate_lines(source)
    level, line = next(lines)
    assert line.value.tag.value == "HEAD"
    with pytest.raises(InvalidTagCharacter):
        next(lines)


def test_spans_reassemble_ascii_input() -> None:
    text = "0 HEAD\r\n1 GEDC\n2 VERS 5.5.1\n0 @I1@ INDI\n1 NAME John /Smith/\n1 FAMS @F1@\n0 TRLR\n"
    source = DecodedSource.from_str(text)

    rebuilt = []
    for level, line in iterate_lines(source):
        raw = line.value
        parts = [source.text(level.span)]
        if raw.xref is not None:
            parts.append(source.text(raw.xref.span))
        parts.append(source.text(raw.tag.span))
        if not raw.value.value.is_none:
            parts.append(source.text(raw.value.span))
        rebuilt.append(" ".join(parts) + "\n")

    assert "".join(rebuilt) == text.replace("\r\n", "\n")
