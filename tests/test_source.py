# tests/test_source.py

from __future__ import annotations

import pytest

from gedcom_spans.loader import DecodedSource, RawSource
from gedcom_spans.spans import Span


def test_lines_handle_every_line_ending() -> None:
    source = RawSource(b"0 HEAD\r\n1 CHAR ASCII\r2 X\n\n0 TRLR")
    lines = [source.bytes_at(span) for span in source.lines()]
    assert lines == [b"0 HEAD", b"1 CHAR ASCII", b"2 X", b"0 TRLR"]


def test_lines_are_relative_to_start_offset() -> None:
    source = DecodedSource(b"\xef\xbb\xbf0 HEAD\n0 TRLR\n", 3)
    assert len(source) == 14
    assert list(source.lines()) == [Span(0, 6), Span(7, 6)]
    assert source.text(Span(0, 6)) == "0 HEAD"


def test_split_once() -> None:
    source = RawSource(b"1 NAME John /Smith/")
    before, after = source.split_once(source.full_span(), " ")
    assert source.bytes_at(before) == b"1"
    assert source.bytes_at(after) == b"NAME John /Smith/"

    whole, missing = source.split_once(Span(2, 4), "@")
    assert whole == Span(2, 4)
    assert missing is None


def test_starts_and_ends_with() -> None:
    source = RawSource(b"@I1@")
    span = source.full_span()
    assert source.starts_with(span, "@")
    assert source.ends_with(span, "@")
    assert not source.starts_with(Span(0, 0), "@")
    assert not source.ends_with(Span(1, 2), "@")


def test_slice_from_and_to_saturate() -> None:
    source = RawSource(b"abcdef")
    span = source.full_span()
    assert source.slice_from(span, 2) == Span(2, 4)
    assert source.slice_from(span, 10) == Span(6, 0)
    assert source.slice_to(span, 3) == Span(0, 3)
    assert source.slice_to(span, 10) == Span(0, 6)


def test_span_of_checks_bounds() -> None:
    source = RawSource(b"abc")
    assert source.span_of(1, 3) == Span(1, 2)
    with pytest.raises(ValueError):
        source.span_of(2, 5)


def test_decoded_source_from_str() -> None:
    source = DecodedSource.from_str("Ĳssel")
    assert len(source) == len("Ĳssel".encode("utf-8"))
    assert source.as_str() == "Ĳssel"
    assert source.text(Span(0, 2)) == "Ĳ"
    assert not source.is_ascii()
