"""
Reading GEDCOM files: encoding bootstrap, record trees and read modes.
"""

from .modes import ParseMode, RawMode, ValidationMode, Validity
from .options import ParseOptions
from .reader import (
    DecodedInput,
    Reader,
    ValidationResult,
    decode_bytes,
    read_head_record,
    read_records,
    validate_bytes,
)
from .structure import (
    FileStructureError,
    MissingHeadRecord,
    MissingTrailerRecord,
    RecordsAfterTrailer,
)

__all__ = [
    "DecodedInput",
    "FileStructureError",
    "MissingHeadRecord",
    "MissingTrailerRecord",
    "ParseMode",
    "ParseOptions",
    "RawMode",
    "Reader",
    "RecordsAfterTrailer",
    "ValidationMode",
    "ValidationResult",
    "Validity",
    "decode_bytes",
    "read_head_record",
    "read_records",
    "validate_bytes",
]
