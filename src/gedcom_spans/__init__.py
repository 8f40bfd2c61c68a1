"""
gedcom-spans: a span-tracking GEDCOM reader.

    from gedcom_spans import Reader

    reader = Reader()
    decoded = reader.decode(data)
    tree = reader.parse(decoded)
"""

from gedcom_spans.reader import (
    DecodedInput,
    ParseOptions,
    Reader,
    ValidationResult,
    Validity,
    decode_bytes,
    read_records,
    validate_bytes,
)
from gedcom_spans.spans import Sourced, Span

__version__ = "0.1.0"

__all__ = [
    "DecodedInput",
    "ParseOptions",
    "Reader",
    "Sourced",
    "Span",
    "ValidationResult",
    "Validity",
    "__version__",
    "decode_bytes",
    "read_records",
    "validate_bytes",
]
