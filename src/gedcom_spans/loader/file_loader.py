# src/gedcom_spans/loader/file_loader.py

"""
File Loader

Memory-maps GEDCOM files read-only so large files are not copied before
their encoding is known.
"""

from __future__ import annotations

import mmap
from pathlib import Path
from typing import Optional, Union

from gedcom_spans.logging import get_logger

log = get_logger(__name__)


class GedcomFile:
    """
    A GEDCOM file opened for reading.

    ``data`` is an ``mmap`` of the whole file, or empty ``bytes`` for an
    empty file (which cannot be mapped). Use as a context manager, or call
    ``close()`` once every span taken from ``data`` is no longer needed.
    """

    def __init__(self, path: Path, data: Union[bytes, mmap.mmap]) -> None:
        self.path = path
        self.data = data
        self._map: Optional[mmap.mmap] = data if isinstance(data, mmap.mmap) else None

    @classmethod
    def load(cls, path: Union[str, Path]) -> "GedcomFile":
        file_path = Path(path).resolve()

        if not file_path.exists():
            log.error(f"Input file does not exist: {file_path}")
            raise FileNotFoundError(f"GEDCOM file not found: {file_path}")

        if not file_path.is_file():
            log.error(f"Input path is not a file: {file_path}")
            raise ValueError(f"Input path is not a file: {file_path}")

        with file_path.open("rb") as f:
            size = file_path.stat().st_size
            if size == 0:
                log.debug(f"Loaded empty file: {file_path}")
                return cls(file_path, b"")
            mapped = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)

        log.debug(f"Memory-mapped {size} bytes from {file_path}")
        return cls(file_path, mapped)

    def __len__(self) -> int:
        return len(self.data)

    @property
    def closed(self) -> bool:
        return self._map is not None and self._map.closed

    def close(self) -> None:
        if self._map is not None and not self._map.closed:
            self._map.close()

    def __enter__(self) -> "GedcomFile":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<GedcomFile {self.path} len={len(self.data)}>"
