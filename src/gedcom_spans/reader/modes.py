# src/gedcom_spans/reader/modes.py

"""
Handlers for non-fatal diagnostics.

Every read reports warnings and advice through a ``NonFatalHandler``;
the mode decides what happens to them:

    RawMode         ignore everything
    ValidationMode  collect everything and count it
    ParseMode       raise errors and warnings, collect advice
"""

from __future__ import annotations

from enum import Enum
from typing import List

from gedcom_spans.diagnostics.base import Diagnostic, GedcomError, Severity
from gedcom_spans.logging import get_logger

log = get_logger(__name__)


class RawMode:
    def report(self, diagnostic: Diagnostic) -> None:
        log.debug(f"Ignoring {diagnostic.severity.value} [{diagnostic.code}]")


class ValidationMode:
    """Collects diagnostics in the order they were reported."""

    def __init__(self) -> None:
        self.diagnostics: List[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def _count(self, severity: Severity) -> int:
        return sum(1 for d in self.diagnostics if d.severity is severity)

    @property
    def error_count(self) -> int:
        return self._count(Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(Severity.WARNING)

    @property
    def advice_count(self) -> int:
        return self._count(Severity.ADVICE)


class ParseMode:
    """Strict handling: any error or warning aborts the read."""

    def __init__(self) -> None:
        self.advice: List[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        if diagnostic.severity is Severity.ADVICE:
            self.advice.append(diagnostic)
            return
        if isinstance(diagnostic, GedcomError):
            raise diagnostic
        raise GedcomError(diagnostic.message(), related=[diagnostic])


class Validity(Enum):
    VALID = "successful"
    VALID_WITH_WARNINGS = "successful (with warnings)"
    INVALID = "unsuccessful"
