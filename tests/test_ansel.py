# tests/test_ansel.py

from __future__ import annotations

import unicodedata

import pytest

from gedcom_spans.encodings.ansel import (
    CombiningCharacterAtEnd,
    InvalidAnselByte,
    StackedCombiningCharacters,
    decode_ansel,
)


def test_ascii_input_is_borrowed() -> None:
    text, borrowed = decode_ansel(b"0 HEAD\n")
    assert text == "0 HEAD\n"
    assert borrowed


def test_combining_mark_moves_after_base_character() -> None:
    text, borrowed = decode_ansel(b"H\xe2ello")
    assert not borrowed
    assert text == "He\u0301llo"
    assert unicodedata.normalize("NFC", text) == "H\u00e9llo"


def test_spacing_characters() -> None:
    text, _ = decode_ansel(b"\xa5sop \xb2st \xcf")
    assert text == "Æsop øst ß"


def test_stacked_combining_characters() -> None:
    with pytest.raises(StackedCombiningCharacters) as info:
        decode_ansel(b"a\xe2\xe3e")
    assert info.value.offset == 2


def test_combining_character_at_end() -> None:
    with pytest.raises(CombiningCharacterAtEnd) as info:
        decode_ansel(b"abc\xe8")
    assert info.value.offset == 3


def test_invalid_byte() -> None:
    with pytest.raises(InvalidAnselByte) as info:
        decode_ansel(b"ab\x80")
    assert info.value.offset == 2
    assert info.value.value == 0x80
