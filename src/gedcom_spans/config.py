# src/gedcom_spans/config.py

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "gedcom_spans.yml"
CONFIG_ENV_VAR = "GEDCOM_SPANS_CONFIG"

_DEFAULT_RENDER: Dict[str, Any] = {
    "context_lines": 2,
    "max_width": None,
    "color": True,
}


class GSConfig:
    def __init__(self, data: Dict[str, Any]):
        self.logging = data.get("logging") or {}
        self.reader = data.get("reader") or {}
        self.render = {**_DEFAULT_RENDER, **(data.get("render") or {})}
        self.debug = bool(data.get("debug", False))

    def __repr__(self) -> str:
        return f"<GSConfig debug={self.debug} reader={self.reader} render={self.render}>"


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else CONFIG_PATH


def load_config(path: Optional[Path] = None) -> GSConfig:
    """
    Load configuration from YAML.

    An explicitly requested file (argument or ``GEDCOM_SPANS_CONFIG``) must
    exist; the bundled default file is optional.
    """
    explicit = path is not None or CONFIG_ENV_VAR in os.environ
    path = path or config_path()

    if not path.exists():
        if explicit:
            raise FileNotFoundError(f"Config file not found: {path}")
        return GSConfig({})

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    return GSConfig(data)


_config_cache: Optional[GSConfig] = None


def get_config() -> GSConfig:
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


def reset_config() -> None:
    """Forget the cached configuration (used by tests)."""
    global _config_cache
    _config_cache = None
