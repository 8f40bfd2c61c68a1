# src/gedcom_spans/diagnostics/base.py

"""
Diagnostic protocol shared by every error, warning and advisory.

A diagnostic has:
    code      stable machine-readable identifier, e.g.
              ``gedcom::record_error::invalid_child_level``
    severity  ERROR / WARNING / ADVICE
    message   human-readable description
    labels    ``(span, text)`` pairs, primary label first
    related   nested diagnostics rendered after this one
    help      optional hint
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple

from gedcom_spans.spans import Span


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    ADVICE = "advice"


class Diagnostic:
    """Mixin describing a reportable condition."""

    code: str = "gedcom::error"
    severity: Severity = Severity.ERROR
    help: Optional[str] = None

    def message(self) -> str:
        return str(self)

    def labels(self) -> List[Tuple[Span, str]]:
        return []

    def related(self) -> List["Diagnostic"]:
        return []


class GedcomError(Exception, Diagnostic):
    """
    Base exception for everything the reader can report.

    Subclasses set ``code`` / ``severity`` as class attributes and pass a
    rendered message plus an optional primary span and label text.
    """

    # the buffer ``span`` points into, when it is not the decoded text
    source: Optional[object] = None

    def __init__(
        self,
        message: str,
        *,
        span: Optional[Span] = None,
        label: str = "",
        related: Sequence[Diagnostic] = (),
        help: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.span = span
        self.label = label
        self._related = list(related)
        if help is not None:
            self.help = help

    def message(self) -> str:
        return self.args[0] if self.args else ""

    def labels(self) -> List[Tuple[Span, str]]:
        if self.span is None:
            return []
        return [(self.span, self.label)]

    def related(self) -> List[Diagnostic]:
        return list(self._related)


class Advice(Diagnostic):
    """A non-exception diagnostic carrying extra context for another one."""

    severity = Severity.ADVICE

    def __init__(
        self,
        message: str,
        *,
        code: str,
        span: Optional[Span] = None,
        label: str = "",
        help: Optional[str] = None,
    ) -> None:
        self._message = message
        self.code = code
        self.span = span
        self.label = label
        self.help = help

    def message(self) -> str:
        return self._message

    def __str__(self) -> str:
        return self._message

    def labels(self) -> List[Tuple[Span, str]]:
        if self.span is None:
            return []
        return [(self.span, self.label)]


class NonFatalHandler(Protocol):
    """
    Receives warnings and other non-fatal diagnostics during a read.

    Implementations may ignore, collect, or escalate (by raising) what
    they are given.
    """

    def report(self, diagnostic: Diagnostic) -> None:
        ...
