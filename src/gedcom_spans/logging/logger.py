"""
Centralized logging configuration for gedcom-spans.

Key behaviors
-------------
* Single entry point via ``get_logger`` to keep handlers/formatters consistent.
* Console logging at the configured level (``WARNING`` unless set), forced
  to ``DEBUG`` by the debug flag.
* Optional master log file plus per-module logs when ``logging.dir`` is set
  in ``config/gedcom_spans.yml``, with optional rotation.
"""

from __future__ import annotations

import logging
from logging import Logger, StreamHandler
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, List, Optional

from gedcom_spans.config import get_config

# -----------------------------------------------------------------------------
# Paths and configuration
# -----------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[3]
BASE_LOGGER_NAME = "gedcom_spans"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Cache so handlers are only created once per module
_logger_cache: Dict[str, Logger] = {}
_base_configured: bool = False
_effective_level: int = logging.WARNING
_log_dir: Optional[Path] = None
_master_log_name: str = "gedcom_spans.log"
_rotate_logs: bool = False


# -----------------------------------------------------------------------------
# Internal helpers
# -----------------------------------------------------------------------------

def _resolve_log_dir() -> Optional[Path]:
    """Resolve and create the log directory, if one is configured."""
    cfg = get_config()

    log_dir_cfg = cfg.logging.get("dir")
    if not log_dir_cfg:
        return None

    log_dir = Path(log_dir_cfg)
    if not log_dir.is_absolute():
        log_dir = PROJECT_ROOT / log_dir

    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def _build_file_handler(path: Path, level: int) -> logging.Handler:
    """Create a file handler with optional rotation."""
    if _rotate_logs:
        handler = RotatingFileHandler(
            path,
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
    else:
        handler = logging.FileHandler(path, encoding="utf-8")

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _configure_base_logger() -> Logger:
    """Configure the shared base logger once."""
    global _base_configured, _effective_level, _log_dir, _master_log_name, _rotate_logs

    base_logger = logging.getLogger(BASE_LOGGER_NAME)
    if _base_configured:
        return base_logger

    cfg = get_config()
    _rotate_logs = bool(cfg.logging.get("rotate", False))
    _master_log_name = cfg.logging.get("file") or "gedcom_spans.log"

    level_name = str(cfg.logging.get("level") or "WARNING").upper()
    base_level = getattr(logging, level_name, logging.WARNING)
    _effective_level = logging.DEBUG if cfg.debug else base_level

    base_logger.setLevel(_effective_level)
    base_logger.propagate = False

    _log_dir = _resolve_log_dir()
    if _log_dir is not None:
        base_logger.addHandler(
            _build_file_handler(_log_dir / _master_log_name, _effective_level)
        )

    console = StreamHandler()
    console.setLevel(_effective_level)
    console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    base_logger.addHandler(console)

    _base_configured = True
    return base_logger


def _module_handler_exists(logger: Logger) -> bool:
    return any(getattr(h, "is_module_handler", False) for h in logger.handlers)


def _attach_module_handler(logger: Logger, module_name: str) -> None:
    if _log_dir is None:
        return
    filename = f"{module_name.replace('.', '_')}.log"

    handler = _build_file_handler(_log_dir / filename, _effective_level)
    handler.is_module_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------

def get_logger(name: Optional[str] = None) -> Logger:
    """Return a logger configured with project-wide handlers.

    * Module loggers propagate to the base console (and master log) handlers.
    * With a log directory configured, each module also gets its own file:
      ``<dir>/<module>.log``.
    * The debug flag in ``config/gedcom_spans.yml`` forces DEBUG output.
    """

    base_logger = _configure_base_logger()
    logger_name = name or BASE_LOGGER_NAME
    logger = logging.getLogger(logger_name)

    if logger_name != base_logger.name:
        logger.setLevel(_effective_level)
        if not _module_handler_exists(logger):
            _attach_module_handler(logger, logger_name)
        logger.propagate = True

    _logger_cache[logger_name] = logger
    return logger


def reset_logging() -> None:
    """Drop configured handlers so the next ``get_logger`` re-reads config."""
    global _base_configured

    for name in list(_logger_cache) + [BASE_LOGGER_NAME]:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    _logger_cache.clear()
    _base_configured = False


def _root_logger() -> Logger:
    return get_logger(BASE_LOGGER_NAME)


def log_debug(message: str, *args, **kwargs) -> None:
    _root_logger().debug(message, *args, **kwargs)


def log_info(message: str, *args, **kwargs) -> None:
    _root_logger().info(message, *args, **kwargs)


def log_warning(message: str, *args, **kwargs) -> None:
    _root_logger().warning(message, *args, **kwargs)


def log_error(message: str, *args, **kwargs) -> None:
    _root_logger().error(message, *args, **kwargs)


def list_active_loggers() -> List[str]:
    """Helper for debugging configuration issues in tests."""
    return list(_logger_cache.keys())
