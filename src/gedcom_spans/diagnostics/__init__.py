"""
Diagnostics: the protocol every reported problem implements, and its
presentation.
"""

from .base import Advice, Diagnostic, GedcomError, NonFatalHandler, Severity
from .report import LABEL_PALETTE, render_diagnostic

__all__ = [
    "Advice",
    "Diagnostic",
    "GedcomError",
    "LABEL_PALETTE",
    "NonFatalHandler",
    "Severity",
    "render_diagnostic",
]
