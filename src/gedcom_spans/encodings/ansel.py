# src/gedcom_spans/encodings/ansel.py

"""
ANSEL (ANSI/NISO Z39.47) decoder with the GEDCOM 5.5 extensions.

ANSEL writes a combining mark *before* the character it modifies; Unicode
writes it after. The decoder keeps one pending mark and emits it right
after the next base character. Stacked marks are rejected.
"""

from __future__ import annotations

from typing import List, Optional, Tuple, Union

from gedcom_spans.logging import get_logger

log = get_logger(__name__)

# combining (non-spacing) characters
COMBINING = {
    0xE0: "\u0309",  # hook above
    0xE1: "\u0300",  # grave
    0xE2: "\u0301",  # acute
    0xE3: "\u0302",  # circumflex
    0xE4: "\u0303",  # tilde
    0xE5: "\u0304",  # macron
    0xE6: "\u0306",  # breve
    0xE7: "\u0307",  # dot above
    0xE8: "\u0308",  # diaeresis
    0xE9: "\u030C",  # caron
    0xEA: "\u030A",  # ring above
    0xEB: "\uFE20",  # ligature, left half
    0xEC: "\uFE20",  # ligature, right half
    0xED: "\u0315",  # comma above right
    0xEE: "\u030B",  # double acute
    0xEF: "\u0310",  # candrabindu
    0xF0: "\u0327",  # cedilla
    0xF1: "\u0328",  # ogonek
    0xF2: "\u0323",  # dot below
    0xF3: "\u0324",  # diaeresis below
    0xF4: "\u0325",  # ring below
    0xF5: "\u0333",  # double low line
    0xF6: "\u0332",  # low line
    0xF7: "\u0326",  # comma below
    0xF8: "\u031C",  # left half ring below
    0xF9: "\u032E",  # breve below
    0xFA: "\uFE22",  # double tilde, left half
    0xFB: "\uFE23",  # double tilde, right half
    0xFE: "\u0313",  # comma above
}

# spacing characters
SPACING = {
    0xA1: "\u0141",  # L with stroke
    0xA2: "\u00D8",  # O with stroke
    0xA3: "\u0110",  # D with stroke
    0xA4: "\u00DE",  # thorn
    0xA5: "\u00C6",  # AE
    0xA6: "\u0152",  # OE
    0xA7: "\u02B9",  # soft sign
    0xA8: "\u00B7",  # middle dot
    0xA9: "\u266D",  # flat
    0xAA: "\u00AE",  # registered
    0xAB: "\u00B1",  # plus-minus
    0xAC: "\u01A0",  # O with horn
    0xAD: "\u01AF",  # U with horn
    0xAE: "\u02BC",  # alif
    0xB0: "\u02BB",  # ayn
    0xB1: "\u0142",  # l with stroke
    0xB2: "\u00F8",  # o with stroke
    0xB3: "\u0111",  # d with stroke
    0xB4: "\u00FE",  # thorn
    0xB5: "\u00E6",  # ae
    0xB6: "\u0153",  # oe
    0xB7: "\u02BA",  # hard sign
    0xB8: "\u0131",  # dotless i
    0xB9: "\u00A3",  # pound
    0xBA: "\u00F0",  # eth
    0xBC: "\u01A1",  # o with horn
    0xBD: "\u01B0",  # u with horn
    0xC0: "\u00B0",  # degree
    0xC1: "\u2113",  # script l
    0xC2: "\u2117",  # phonogram copyright
    0xC3: "\u00A9",  # copyright
    0xC4: "\u266F",  # sharp
    0xC5: "\u00BF",  # inverted question mark
    0xC6: "\u00A1",  # inverted exclamation mark
    # GEDCOM extensions
    0xBE: "\u25A1",  # empty box
    0xBF: "\u25A0",  # black box
    0xCD: "e",  # midline e
    0xCE: "o",  # midline o
    0xCF: "\u00DF",  # es zet
    0xFC: "\u0338",  # diacritic slash
}


# ---------- Errors ----------

class AnselError(ValueError):
    """Raised when bytes cannot be decoded as ANSEL."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(message)
        self.offset = offset


class InvalidAnselByte(AnselError):
    def __init__(self, offset: int, value: int) -> None:
        super().__init__(f"the byte at index {offset} (value 0x{value:x}) is not ANSEL", offset)
        self.value = value


class StackedCombiningCharacters(AnselError):
    def __init__(self, offset: int) -> None:
        super().__init__("stacked combining characters are not allowed", offset)


class CombiningCharacterAtEnd(AnselError):
    def __init__(self, offset: int) -> None:
        super().__init__("combining character at end of input", offset)


# ---------- Decoding ----------

def decode_ansel(data: Union[bytes, bytearray, memoryview]) -> Tuple[str, bool]:
    """
    Decode ANSEL bytes.

    Returns ``(text, borrowed)``; ``borrowed`` is True when the input was
    pure ASCII and the text is therefore byte-identical to it.

    Raises:
        InvalidAnselByte: for a byte with no ANSEL mapping.
        StackedCombiningCharacters: for a mark directly following another mark.
        CombiningCharacterAtEnd: when the input ends with a pending mark.
    """
    raw = bytes(data)
    if raw.isascii():
        return raw.decode("ascii"), True

    out: List[str] = []
    pending: Optional[str] = None
    pending_offset = 0

    for offset, byte in enumerate(raw):
        mark = COMBINING.get(byte)
        if mark is not None:
            if pending is not None:
                raise StackedCombiningCharacters(offset)
            pending = mark
            pending_offset = offset
            continue

        if byte < 0x80:
            out.append(chr(byte))
        else:
            char = SPACING.get(byte)
            if char is None:
                raise InvalidAnselByte(offset, byte)
            out.append(char)

        if pending is not None:
            out.append(pending)
            pending = None

    if pending is not None:
        raise CombiningCharacterAtEnd(pending_offset)

    log.debug(f"Decoded {len(raw)} ANSEL bytes")
    return "".join(out), False
