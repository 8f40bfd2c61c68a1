# src/gedcom_spans/loader/value_reconstructor.py

"""
Value Reconstructor: folds GEDCOM CONT / CONC sub-records into a logical value.

Rules (GEDCOM 5.5.1 / 5.5.5 / 7.0):
    - CONC: Append text directly to the parent's value.
            No newline added. (CONC does not exist in 7.0 but is accepted.)

    - CONT: Append a newline + the text.
            Always produces a new line in the logical output.

Examples:
    Parent NOTE value: "Line one"
    Child CONC value:  " and more"
        → "Line one and more"

    Child CONT value:  "Second line"
        → "Line one and more\nSecond line"

The record tree is left untouched: CONT/CONC records keep their spans so
diagnostics can still point at them.
"""

from __future__ import annotations

from typing import List, Optional

from .tree_builder import RawRecord


def fold_continuations(record: RawRecord) -> Optional[str]:
    """
    Return the logical string value of ``record``.

    Returns None when the record has neither a value nor any continuation
    sub-records.
    """
    parts: List[str] = []
    has_value = not record.value.is_none
    if has_value:
        parts.append(str(record.value))

    for child in record.records:
        tag = child.value.tag
        if tag == "CONC":
            parts.append(str(child.value.value))
        elif tag == "CONT":
            parts.append("\n")
            parts.append(str(child.value.value))
        else:
            continue
        has_value = True

    if not has_value:
        return None
    return "".join(parts)
