"""
Encodings: detection from the first bytes of a file, decoding (including
ANSEL), and the errors raised along the way.
"""

from .ansel import (
    AnselError,
    CombiningCharacterAtEnd,
    InvalidAnselByte,
    StackedCombiningCharacters,
    decode_ansel,
)
from .detection import DetectedEncoding, detect_external_encoding
from .errors import (
    DecodingError,
    EncodingError,
    ExternalEncodingMismatch,
    FileEncodingMismatch,
    InvalidBOM,
    InvalidDataForEncoding,
    InvalidHeader,
    MultiVolumeFragment,
    NotGedcomFile,
    PossibleEncodings,
    UnknownEncoding,
    VersionEncodingMismatch,
    VersionEncodingMismatchWarning,
)
from .types import (
    Assumed,
    BOMDetected,
    DeterminedByVersion,
    Encoding,
    EncodingReason,
    Forced,
    GedcomEncoding,
    Sniffed,
    SpecifiedInHeader,
)

__all__ = [
    "AnselError",
    "Assumed",
    "BOMDetected",
    "CombiningCharacterAtEnd",
    "DecodingError",
    "DetectedEncoding",
    "DeterminedByVersion",
    "Encoding",
    "EncodingError",
    "EncodingReason",
    "ExternalEncodingMismatch",
    "FileEncodingMismatch",
    "Forced",
    "GedcomEncoding",
    "InvalidAnselByte",
    "InvalidBOM",
    "InvalidDataForEncoding",
    "InvalidHeader",
    "MultiVolumeFragment",
    "NotGedcomFile",
    "PossibleEncodings",
    "Sniffed",
    "SpecifiedInHeader",
    "StackedCombiningCharacters",
    "UnknownEncoding",
    "VersionEncodingMismatch",
    "VersionEncodingMismatchWarning",
    "decode_ansel",
    "detect_external_encoding",
]
