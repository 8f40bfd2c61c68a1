# src/gedcom_spans/reader/options.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gedcom_spans.config import GSConfig, get_config
from gedcom_spans.encodings.types import Encoding
from gedcom_spans.versions import KnownVersion


@dataclass(frozen=True)
class ParseOptions:
    """
    Overrides for the reader.

    Attributes:
        force_encoding: Decode with this encoding, skipping byte-order-mark
            sniffing and the ``HEAD.CHAR`` record.
        force_version: Read the file as this version instead of the one in
            ``HEAD.GEDC.VERS``. The encoding is still checked against it.
    """

    force_encoding: Optional[Encoding] = None
    force_version: Optional[KnownVersion] = None

    @classmethod
    def from_names(
        cls,
        encoding: Optional[str] = None,
        version: Optional[str] = None,
    ) -> "ParseOptions":
        """Build options from user-facing names such as ``"ansel"`` and ``"5.5.1"``."""
        return cls(
            force_encoding=Encoding.from_name(encoding) if encoding else None,
            force_version=KnownVersion.from_name(version) if version else None,
        )

    @classmethod
    def from_config(cls, cfg: Optional[GSConfig] = None) -> "ParseOptions":
        cfg = cfg or get_config()
        return cls.from_names(
            cfg.reader.get("force_encoding"),
            cfg.reader.get("force_version"),
        )
